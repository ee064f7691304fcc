# Middleware package init
"""
After School Lessons Backend — Middleware Package
===================================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Access: request ID + access log] → [GZip] → [CORS] → Route Handler

    - access.py: correlation ID for logs, error bodies and the response
                 header; one access line per request with a short summary
                 of the lesson, search term or image it addressed
    - GZip / CORS: Starlette built-ins configured in main.py
"""
