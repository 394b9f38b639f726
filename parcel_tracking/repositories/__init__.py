# Repositories package init
"""
Hotel Parcel Tracking — Storage Access Layer
==============================================

What:  One repository per entity, each a thin set of query predicates on top
       of a generic get / list_all / save / delete store.
Why:   Services express rules ("is the room occupied?") without building SQL.

Repository Inventory:
    - SQLAlchemyRepository: generic record store (base.py)
    - GuestRepository: occupancy and check-in status predicates
    - ParcelRepository: tracking number, collection status and owner predicates
"""
