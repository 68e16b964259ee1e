"""
Songs API — Middleware Package
================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID first, so the access log line can carry it
    2. Logging measures everything downstream, including the store call
    3. CORS is FastAPI's CORSMiddleware
"""
