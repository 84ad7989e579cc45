# Middleware package init
"""
ArtCritic Backend — Middleware Package
=======================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    The request id is set first so the access line and any error body
    produced further in share it.
"""
