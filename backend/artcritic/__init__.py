"""
ArtCritic Backend — Application Package Initializer
===================================================

What: Marks the `artcritic` directory as a Python package.
Who:  Imported by uvicorn (`artcritic.main:app`), pytest, and every internal module.

Architecture Note:
    The backend is layered the same way for every request:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← multipart/JSON, auth header, status codes
    ├─────────────────────────────────────┤
    │     Analysis Service (Orchestrator) │  ← validate → prompt → AI → extract → persist
    ├─────────────────────────────────────┤
    │  Extraction / Style / Resources     │  ← pure text heuristics, no I/O
    ├─────────────────────────────────────┤
    │  Collaborators (Gemini, Data Svc)   │  ← remote calls behind narrow interfaces
    └─────────────────────────────────────┘

    The middle two layers never touch HTTP; the bottom layer is swappable
    behind `VisionClient` and `PersistenceClient`.
"""

__version__ = "1.0.0"
