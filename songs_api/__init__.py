"""
Songs API — Application Package Initializer
=============================================

What: Marks the `songs_api` directory as a Python package.
Why:  Enables module imports like `from songs_api.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The service is a thin adapter between HTTP and a key-value store:

    ┌─────────────────────────────────────┐
    │      Routes + Validator (HTTP)      │  ← method dispatch, presence checks
    ├─────────────────────────────────────┤
    │       SongService (Adapter)         │  ← store result → response shape
    ├─────────────────────────────────────┤
    │        SongStore (DynamoDB)         │  ← point get / point put
    └─────────────────────────────────────┘

    Each request walks this pipeline once; nothing is shared between
    requests except the read-only store client.
"""

__version__ = "1.0.0"
