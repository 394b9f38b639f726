"""
Hotel Parcel Tracking — Application Package
=============================================

What: Front-desk service tracking guests (check-in / check-out) and the parcels
      received on their behalf (accepted / collected).

Architecture Note:
    The backend is a thin layered service:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │       Services (Business Rules)     │  ← check-in / parcel guards
    ├─────────────────────────────────────┤
    │      Repositories (Storage Access)  │  ← query predicates per entity
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Each request flows one way: route → service → repository → service → route.
"""

__version__ = "1.0.0"
