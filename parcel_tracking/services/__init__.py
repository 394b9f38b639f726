# Services package init
"""
Hotel Parcel Tracking — Services Layer
========================================

What:  Business rules sitting between routes (HTTP) and repositories (persistence).
How:   Stateless singletons. Every operation receives the request's AsyncSession,
       enforces the front-desk rules and returns response schemas.

Service Inventory:
    - GuestService:  check-in, check-out, guest lookups and name search
    - ParcelService: parcel acceptance, collection and parcel projections

Rule violations surface as ConflictError, missing rows as NotFoundError; the
exception handlers in main.py turn both into JSON error responses.
"""
