# Middleware package init
"""
Roster Backend — Middleware Package
====================================

Middleware Chain:
    Request → [Rate Limit] → [Request ID] → [Logging] → [CORS] → Route Handler

    Rate limiting runs first so rejected requests cost nothing downstream.
    The request ID is set before the access log line is written.
"""
