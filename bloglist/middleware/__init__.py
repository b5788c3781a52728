# Middleware package init
"""
Bloglist — Middleware Package
==============================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    Rate limiting runs before a request id exists, so its 429 bodies carry
    an empty request_id.
"""
