"""
World API Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Access Logging] → [CORS] → Route Handler

    - Request ID is stored in a ContextVar and echoed as X-Request-ID
    - Access logging records method, route template, status, duration
      and session presence once the response is ready
"""
