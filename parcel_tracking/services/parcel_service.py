"""
Hotel Parcel Tracking — Parcel Service (Business Rules)
=========================================================

What:  Acceptance and collection rules for parcels.
Who:   Called by the parcel route handlers; calls the guest and parcel repositories.

Rules:
    accept   → guest must exist (NotFoundError)
             → guest must be checked in (ConflictError)
             → tracking number must be new, collected or not (ConflictError)
    collect  → parcel must exist (NotFoundError)
             → parcel must not be collected yet (ConflictError)

    Uncollected ──collect──▶ Collected   (one way, terminal)

Collection is allowed after the owning guest has checked out; parcels left
behind can still be picked up.

Design Decision:
    ParcelService is stateless, like the repositories it uses. The session
    is passed to every call, so one module-level instance serves all requests.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracking.exceptions import ConflictError, NotFoundError
from parcel_tracking.models.guest import Guest
from parcel_tracking.models.parcel import Parcel
from parcel_tracking.repositories.guest_repository import guest_repository
from parcel_tracking.repositories.parcel_repository import parcel_repository
from parcel_tracking.schemas.parcel import ParcelResponse

logger = logging.getLogger(__name__)


def to_parcel_response(parcel: Parcel, owner: Optional[Guest] = None) -> ParcelResponse:
    """
    Builds the API representation of a parcel.

    `owner` is passed when the caller already holds the guest (nested guest
    responses); otherwise the eagerly joined Parcel.guest is used.
    """
    guest = owner if owner is not None else parcel.guest
    return ParcelResponse(
        id=parcel.id,
        tracking_number=parcel.tracking_number,
        sender=parcel.sender,
        description=parcel.description,
        arrival_time=parcel.arrival_time,
        collection_time=parcel.collection_time,
        collected=bool(parcel.collected),
        guest_id=guest.id,
        guest_name=guest.name,
        guest_room_number=guest.room_number,
    )


class ParcelService:
    """
    Business logic layer for parcel operations.

    Mutations:
        - accept(): register a parcel for a checked-in guest
        - collect() / collect_by_tracking_number(): hand a parcel over

    Read-only projections:
        - list_available_for_guest(), list_available_for_room()
        - list_all_uncollected(), list_collected()
        - list_for_checked_in_guests(), list_for_guest(), list_all()
        - get_by_tracking_number()
    """

    async def accept(
        self,
        db: AsyncSession,
        tracking_number: str,
        sender: str,
        guest_id: int,
        description: Optional[str] = None,
    ) -> ParcelResponse:
        """
        Accepts a parcel at the desk for a checked-in guest.

        Raises:
            NotFoundError: guest_id does not resolve to a guest
            ConflictError: guest checked out, or tracking number already used
        """
        guest = await guest_repository.get(db, guest_id)
        if guest is None:
            raise NotFoundError(resource="Guest", resource_id=str(guest_id))

        if not guest.is_checked_in:
            logger.warning(
                "Rejected parcel %s: guest %s (%s) is checked out",
                tracking_number, guest.id, guest.name,
            )
            raise ConflictError(
                f"Cannot accept parcel for guest who is not checked in: {guest.name}",
                context={"guest_id": guest.id},
            )

        if await parcel_repository.find_by_tracking_number(db, tracking_number) is not None:
            logger.warning("Rejected parcel %s: tracking number already exists", tracking_number)
            raise self._duplicate_tracking_number(tracking_number)

        parcel = Parcel(
            tracking_number=tracking_number,
            sender=sender,
            description=description,
            arrival_time=datetime.now(timezone.utc),
            collection_time=None,
            collected=False,
            guest=guest,
        )
        try:
            parcel = await parcel_repository.save(db, parcel)
        except IntegrityError as e:
            # A concurrent request inserted the same tracking number first
            logger.warning("Unique constraint rejected parcel %s", tracking_number)
            raise self._duplicate_tracking_number(tracking_number) from e

        logger.info(
            "Parcel %s accepted (tracking=%s) for guest %s in room %s",
            parcel.id, parcel.tracking_number, guest.id, guest.room_number,
        )
        return to_parcel_response(parcel, owner=guest)

    async def collect(self, db: AsyncSession, parcel_id: int) -> ParcelResponse:
        """
        Marks a parcel as collected.

        Raises:
            NotFoundError: no parcel with that ID
            ConflictError: parcel already collected
        """
        parcel = await parcel_repository.get(db, parcel_id)
        if parcel is None:
            raise NotFoundError(resource="Parcel", resource_id=str(parcel_id))

        if parcel.collected:
            logger.warning("Rejected collection of parcel %s: already collected", parcel.id)
            raise ConflictError(
                "Parcel is already collected",
                context={"parcel_id": parcel.id, "tracking_number": parcel.tracking_number},
            )

        parcel.mark_as_collected(datetime.now(timezone.utc))
        parcel = await parcel_repository.save(db, parcel)

        logger.info("Parcel %s collected (tracking=%s)", parcel.id, parcel.tracking_number)
        return to_parcel_response(parcel)

    async def collect_by_tracking_number(self, db: AsyncSession, tracking_number: str) -> ParcelResponse:
        parcel = await self._require_by_tracking_number(db, tracking_number)
        return await self.collect(db, parcel.id)

    async def get_by_tracking_number(self, db: AsyncSession, tracking_number: str) -> ParcelResponse:
        parcel = await self._require_by_tracking_number(db, tracking_number)
        return to_parcel_response(parcel)

    async def list_available_for_guest(self, db: AsyncSession, guest_id: int) -> List[ParcelResponse]:
        parcels = await parcel_repository.list_uncollected_by_guest(db, guest_id)
        return [to_parcel_response(p) for p in parcels]

    async def list_available_for_room(self, db: AsyncSession, room_number: str) -> List[ParcelResponse]:
        parcels = await parcel_repository.list_uncollected_by_room(db, room_number)
        return [to_parcel_response(p) for p in parcels]

    async def list_all_uncollected(self, db: AsyncSession) -> List[ParcelResponse]:
        parcels = await parcel_repository.list_uncollected(db)
        return [to_parcel_response(p) for p in parcels]

    async def list_collected(self, db: AsyncSession) -> List[ParcelResponse]:
        parcels = await parcel_repository.list_collected(db)
        return [to_parcel_response(p) for p in parcels]

    async def list_for_checked_in_guests(self, db: AsyncSession) -> List[ParcelResponse]:
        parcels = await parcel_repository.list_for_checked_in_guests(db)
        return [to_parcel_response(p) for p in parcels]

    async def list_for_guest(self, db: AsyncSession, guest_id: int) -> List[ParcelResponse]:
        parcels = await parcel_repository.list_by_guest(db, guest_id)
        return [to_parcel_response(p) for p in parcels]

    async def list_all(self, db: AsyncSession) -> List[ParcelResponse]:
        parcels = await parcel_repository.list_all(db)
        return [to_parcel_response(p) for p in parcels]

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _require_by_tracking_number(self, db: AsyncSession, tracking_number: str) -> Parcel:
        parcel = await parcel_repository.find_by_tracking_number(db, tracking_number)
        if parcel is None:
            raise NotFoundError(
                resource="Parcel",
                resource_id=tracking_number,
                key="tracking number",
            )
        return parcel

    @staticmethod
    def _duplicate_tracking_number(tracking_number: str) -> ConflictError:
        return ConflictError(
            f"Parcel with tracking number {tracking_number} already exists",
            context={"tracking_number": tracking_number},
        )


# ── Singleton Instance ────────────────────────────────────────────────────
parcel_service = ParcelService()
