# Routes package init
"""
WellBloom Backend: API Routes Package
======================================

One module per resource, each exposing `router` (prefix /api):

    activities.py        /api/activities
    exercises.py         /api/exercises
    meditations.py       /api/meditations
    emotions.py          /api/emotions
    phrases.py           /api/phrases
    emotion_records.py   /api/emotion-records
    journal.py           /api/journal
    reports.py           /api/reports
    admins.py            /api/admins
    users.py             /api/users
    health.py            /health

Routes stay thin: parse the request, call the service, return its result.
Literal sub-paths (/search, /stats, /completed) are declared before the
/{id} route of the same resource.
"""
