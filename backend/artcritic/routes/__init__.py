# Routes package init
"""
ArtCritic Backend — API Routes
===============================

    POST /api/ai/analyze                    → analyze.py
    POST /api/ai/analyze-url                → analyze.py
    POST /api/ai/upload                     → analyze.py
    GET  /api/ai/artwork/{id}/analyses      → artworks.py
    GET  /api/ai/user/{id}/artworks         → artworks.py
    GET  /api/ai/user/{id}/analyses         → artworks.py
    GET  /api/ai/analyses/{id}              → artworks.py
    GET  /health                            → health.py
"""
