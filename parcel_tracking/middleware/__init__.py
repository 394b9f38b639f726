# Middleware package init
"""
Hotel Parcel Tracking — Middleware Package
============================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: assign the correlation ID first so every later log line has it
    2. Logging: measure and log the full request, including error responses
    3. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
