"""
Hotel Parcel Tracking — Schema Tests
======================================

What:  The shared model configuration used by guest and parcel schemas.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from parcel_tracking.schemas.common import API_MODEL_CONFIG
from parcel_tracking.schemas.guest import GuestCheckInRequest, GuestResponse
from parcel_tracking.schemas.parcel import ParcelAcceptRequest, ParcelResponse


class TestSharedModelConfig:

    @pytest.mark.parametrize(
        "schema", [GuestCheckInRequest, GuestResponse, ParcelAcceptRequest, ParcelResponse]
    )
    def test_every_api_schema_uses_common_config(self, schema):
        for key, value in API_MODEL_CONFIG.items():
            assert schema.model_config[key] == value

    def test_camel_and_snake_case_input_both_accepted(self):
        camel = GuestCheckInRequest.model_validate({"name": " Alice ", "roomNumber": "101"})
        snake = GuestCheckInRequest.model_validate({"name": "Alice", "room_number": "101"})

        assert camel == snake
        assert camel.name == "Alice"

    def test_guest_response_serializes_camel_case(self):
        now = datetime.now(timezone.utc)
        response = GuestResponse(
            id=1,
            name="Alice",
            room_number="101",
            check_in_time=now,
            checked_in=True,
        )

        dumped = response.model_dump(by_alias=True)

        assert set(dumped) == {
            "id", "name", "roomNumber", "checkInTime", "checkOutTime", "checkedIn", "parcels",
        }

    def test_blank_tracking_number_rejected(self):
        with pytest.raises(PydanticValidationError):
            ParcelAcceptRequest.model_validate(
                {"trackingNumber": "   ", "sender": "DHL", "guestId": 1}
            )
