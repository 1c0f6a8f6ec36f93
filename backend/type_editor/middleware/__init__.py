"""
Type Editor Backend — Middleware Package
=========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit first: abusive clients are rejected before any processing
    2. Request ID: correlation id for every log line of the request
    3. Logging: one access line with status and duration
    4. GZip and CORS: FastAPI/Starlette built-ins

    Responses pass back through the chain in reverse, so the request id
    header and the logged duration are attached on the way out.
"""
