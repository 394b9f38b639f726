# Routes package init
"""
Hotel Parcel Tracking — API Routes Package
============================================

Route Inventory:
    - guests.py:   /guests/...    (check-in, check-out, guest lookups)
    - parcels.py:  /parcels/...   (accept, collect, parcel projections)
    - health.py:   GET /health    (service health check)

Routes are thin: extract request data, call the service, return the
response model. Business rules live in services/.
"""
