"""
Hotel Parcel Tracking — Parcel Request/Response Schemas
=========================================================

What:  Pydantic models defining the parcel API contract.
How:   FastAPI validates request bodies against these models and serializes
       responses through them. JSON uses camelCase (trackingNumber, guestId);
       snake_case is accepted on input as well.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from parcel_tracking.schemas.common import API_MODEL_CONFIG


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ParcelAcceptRequest(BaseModel):
    """
    Body of POST /parcels/accept.

    Example:
        {"trackingNumber": "TRK123", "sender": "DHL", "description": "Box", "guestId": 1}
    """
    tracking_number: str = Field(min_length=1, max_length=100, description="Carrier tracking number")
    sender: str = Field(min_length=1, max_length=255, description="Sender or carrier name")
    description: Optional[str] = Field(default=None, max_length=2000, description="Free-text description")
    guest_id: int = Field(ge=1, description="ID of the checked-in guest the parcel is for")

    model_config = API_MODEL_CONFIG

    @field_validator("tracking_number", "sender")
    @classmethod
    def not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ParcelResponse(BaseModel):
    """
    Full representation of a parcel.

    guest_name and guest_room_number are copied from the owning guest so the
    desk can display a parcel list without a second request.
    """
    id: int
    tracking_number: str
    sender: str
    description: Optional[str] = None
    arrival_time: datetime
    collection_time: Optional[datetime] = None
    collected: bool
    guest_id: int
    guest_name: str
    guest_room_number: str

    model_config = API_MODEL_CONFIG
