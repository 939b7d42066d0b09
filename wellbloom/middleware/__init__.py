# Middleware package init
"""
WellBloom Backend: Middleware Package
======================================

Middleware chain (outermost first):
    Request → [Request ID] → [Access Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first, so every later log line carries the correlation ID
    - Access logging measures the full handler time and sees the final status
"""
