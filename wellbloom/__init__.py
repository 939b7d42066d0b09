"""
WellBloom Backend: Application Package
=======================================

What: Emotional-wellbeing tracking API: users log emotions, keep a journal
      (bitácora) about them, follow activities, exercises and meditations,
      and back-office administrators answer reports.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (rules + data store)     │  ← checks, guards, aggregates
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
