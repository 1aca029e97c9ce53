# Middleware package init
"""
NoteTaker Backend: Middleware Package
======================================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    The request ID is set before the logging middleware reads it, so every
    access line carries the ID that is also returned in X-Request-ID.
"""
