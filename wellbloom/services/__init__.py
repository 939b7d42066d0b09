# Services package init
"""
WellBloom Backend: Services Layer
==================================

The data store and its business rules. Every service is a stateless class
with a module-level singleton; each method receives the request's
AsyncSession as its first argument and returns response schemas.

Service Inventory:
    - ActivityService, ExerciseService, MeditationService
    - EmotionService, PhraseService, EmotionRecordService
    - JournalService
    - ReportService, AdminService
    - UserService

Shared building blocks:
    - base.storage_guard: maps SQLAlchemy failures to application errors
    - query.Criteria / Page / fetch_page: filtered, paginated listings
"""
