"""
Hotel Parcel Tracking — Parcel Repository
===========================================

Query predicates over the `parcels` table. "Available" / "uncollected" both
mean is_collected = false. Predicates on the owning guest add an explicit
JOIN; SQLAlchemy aliases the eager join configured on Parcel.guest, so the
two do not collide.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracking.models.guest import Guest
from parcel_tracking.models.parcel import Parcel
from parcel_tracking.repositories.base import SQLAlchemyRepository


class ParcelRepository(SQLAlchemyRepository[Parcel]):
    model = Parcel

    async def find_by_tracking_number(self, db: AsyncSession, tracking_number: str) -> Optional[Parcel]:
        query = select(Parcel).where(Parcel.tracking_number == tracking_number)
        return await self._first(db, query, "find_by_tracking_number")

    async def list_by_guest(self, db: AsyncSession, guest_id: int) -> List[Parcel]:
        query = select(Parcel).where(Parcel.guest_id == guest_id).order_by(Parcel.id)
        return await self._all(db, query, "list_by_guest")

    async def list_uncollected_by_guest(self, db: AsyncSession, guest_id: int) -> List[Parcel]:
        query = (
            select(Parcel)
            .where(Parcel.guest_id == guest_id, Parcel.collected.is_(False))
            .order_by(Parcel.id)
        )
        return await self._all(db, query, "list_uncollected_by_guest")

    async def list_uncollected(self, db: AsyncSession) -> List[Parcel]:
        query = select(Parcel).where(Parcel.collected.is_(False)).order_by(Parcel.id)
        return await self._all(db, query, "list_uncollected")

    async def list_collected(self, db: AsyncSession) -> List[Parcel]:
        query = select(Parcel).where(Parcel.collected.is_(True)).order_by(Parcel.id)
        return await self._all(db, query, "list_collected")

    async def list_for_checked_in_guests(self, db: AsyncSession) -> List[Parcel]:
        """Every parcel (collected or not) whose owner is still checked in."""
        query = (
            select(Parcel)
            .join(Parcel.guest)
            .where(Guest.check_out_time.is_(None))
            .order_by(Parcel.id)
        )
        return await self._all(db, query, "list_for_checked_in_guests")

    async def list_uncollected_by_room(self, db: AsyncSession, room_number: str) -> List[Parcel]:
        """
        Uncollected parcels of any guest who has stayed in the room, including
        guests who already checked out and left parcels behind.
        """
        query = (
            select(Parcel)
            .join(Parcel.guest)
            .where(Guest.room_number == room_number, Parcel.collected.is_(False))
            .order_by(Parcel.id)
        )
        return await self._all(db, query, "list_uncollected_by_room")


parcel_repository = ParcelRepository()
