"""
Hotel Parcel Tracking — Guest Request/Response Schemas
========================================================

What:  Pydantic models defining the guest API contract.
Who:   Used by route handlers as request bodies and return types.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from parcel_tracking.schemas.common import API_MODEL_CONFIG
from parcel_tracking.schemas.parcel import ParcelResponse


class GuestCheckInRequest(BaseModel):
    """
    Body of POST /guests/check-in.

    Example:
        {"name": "Alice", "roomNumber": "101"}
    """
    name: str = Field(min_length=1, max_length=255, description="Guest full name")
    room_number: str = Field(min_length=1, max_length=20, description="Room the guest checks into")

    model_config = API_MODEL_CONFIG

    @field_validator("name", "room_number")
    @classmethod
    def not_blank(cls, v: str) -> str:
        """Trims surrounding whitespace; whitespace-only values are rejected."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class GuestResponse(BaseModel):
    """
    Full representation of a guest.

    checked_in is derived from check_out_time. parcels lists every parcel
    received for the guest (collected or not) and is null when there are none.
    """
    id: int
    name: str
    room_number: str
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    checked_in: bool
    parcels: Optional[List[ParcelResponse]] = None

    model_config = API_MODEL_CONFIG
