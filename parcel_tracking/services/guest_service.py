"""
Hotel Parcel Tracking — Guest Service (Business Rules)
========================================================

What:  Check-in / check-out rules for hotel guests.
Who:   Called by the guest route handlers; calls GuestRepository.

Rules:
    check_in   → room must not have a checked-in guest (ConflictError)
    check_out  → guest must exist (NotFoundError)
               → guest must still be checked in (ConflictError)

    CheckedIn ──check_out──▶ CheckedOut   (one way, terminal)

Occupancy is checked before the INSERT, and the partial unique index on
guests(room_number) WHERE check_out_time IS NULL rejects whatever slips
through between the check and the write. Both surface as ConflictError.
"""

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracking.exceptions import ConflictError, NotFoundError, ValidationError
from parcel_tracking.models.guest import Guest
from parcel_tracking.repositories.guest_repository import guest_repository
from parcel_tracking.schemas.guest import GuestResponse
from parcel_tracking.services.parcel_service import to_parcel_response

logger = logging.getLogger(__name__)


def to_guest_response(guest: Guest) -> GuestResponse:
    """Builds the API representation of a guest; parcels is None when the guest has none."""
    parcels = [to_parcel_response(parcel, owner=guest) for parcel in guest.parcels]
    return GuestResponse(
        id=guest.id,
        name=guest.name,
        room_number=guest.room_number,
        check_in_time=guest.check_in_time,
        check_out_time=guest.check_out_time,
        checked_in=guest.is_checked_in,
        parcels=parcels or None,
    )


class GuestService:
    """
    Business logic layer for guest operations.

    Mutations:
        - check_in(): register a guest in a free room
        - check_out() / check_out_by_room(): end a stay

    Queries:
        - get_by_id(), get_checked_in_by_room(), is_checked_in_by_room()
        - list_all(), list_checked_in(), list_checked_out(), search_by_name()
    """

    async def check_in(self, db: AsyncSession, name: str, room_number: str) -> GuestResponse:
        """
        Checks a new guest into a room.

        Raises:
            ConflictError: the room already has a checked-in guest
        """
        if await guest_repository.is_room_occupied(db, room_number):
            logger.warning("Rejected check-in of '%s': room %s is occupied", name, room_number)
            raise self._room_occupied(room_number)

        guest = Guest(
            name=name,
            room_number=room_number,
            check_in_time=datetime.now(timezone.utc),
            check_out_time=None,
            parcels=[],
        )
        try:
            guest = await guest_repository.save(db, guest)
        except IntegrityError as e:
            logger.warning("Unique index rejected check-in to room %s", room_number)
            raise self._room_occupied(room_number) from e

        logger.info("Guest %s ('%s') checked into room %s", guest.id, guest.name, guest.room_number)
        return to_guest_response(guest)

    async def check_out(self, db: AsyncSession, guest_id: int) -> GuestResponse:
        """
        Checks a guest out.

        Raises:
            NotFoundError: no guest with that ID
            ConflictError: the guest has already checked out
        """
        guest = await guest_repository.get(db, guest_id)
        if guest is None:
            raise NotFoundError(resource="Guest", resource_id=str(guest_id))

        if not guest.is_checked_in:
            logger.warning("Rejected check-out of guest %s: already checked out", guest.id)
            raise ConflictError(
                "Guest is already checked out",
                context={"guest_id": guest.id},
            )

        guest.check_out(datetime.now(timezone.utc))
        guest = await guest_repository.save(db, guest)

        logger.info("Guest %s checked out of room %s", guest.id, guest.room_number)
        return to_guest_response(guest)

    async def check_out_by_room(self, db: AsyncSession, room_number: str) -> GuestResponse:
        guest = await self._require_occupant(db, room_number)
        return await self.check_out(db, guest.id)

    async def get_by_id(self, db: AsyncSession, guest_id: int) -> GuestResponse:
        guest = await guest_repository.get(db, guest_id)
        if guest is None:
            raise NotFoundError(resource="Guest", resource_id=str(guest_id))
        return to_guest_response(guest)

    async def get_checked_in_by_room(self, db: AsyncSession, room_number: str) -> GuestResponse:
        guest = await self._require_occupant(db, room_number)
        return to_guest_response(guest)

    async def is_checked_in_by_room(self, db: AsyncSession, room_number: str) -> bool:
        return await guest_repository.is_room_occupied(db, room_number)

    async def list_checked_in(self, db: AsyncSession) -> List[GuestResponse]:
        guests = await guest_repository.list_checked_in(db)
        return [to_guest_response(g) for g in guests]

    async def list_checked_out(self, db: AsyncSession) -> List[GuestResponse]:
        guests = await guest_repository.list_checked_out(db)
        return [to_guest_response(g) for g in guests]

    async def list_all(self, db: AsyncSession) -> List[GuestResponse]:
        guests = await guest_repository.list_all(db)
        return [to_guest_response(g) for g in guests]

    async def search_by_name(self, db: AsyncSession, name: str) -> List[GuestResponse]:
        fragment = name.strip()
        if not fragment:
            raise ValidationError("Search term must not be blank", field="name")
        guests = await guest_repository.search_by_name(db, fragment)
        return [to_guest_response(g) for g in guests]

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _require_occupant(self, db: AsyncSession, room_number: str) -> Guest:
        guest = await guest_repository.find_checked_in_by_room(db, room_number)
        if guest is None:
            raise NotFoundError(
                resource="Checked-in guest",
                resource_id=room_number,
                key="room number",
            )
        return guest

    @staticmethod
    def _room_occupied(room_number: str) -> ConflictError:
        return ConflictError(
            f"Room {room_number} is already occupied",
            context={"room_number": room_number},
        )


# ── Singleton Instance ────────────────────────────────────────────────────
guest_service = GuestService()
