"""
Hotel Parcel Tracking — Guest Repository
==========================================

Query predicates over the `guests` table. "Checked in" always means
check_out_time IS NULL.
"""

from typing import List, Optional

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracking.models.guest import Guest
from parcel_tracking.repositories.base import SQLAlchemyRepository


class GuestRepository(SQLAlchemyRepository[Guest]):
    model = Guest

    async def find_checked_in_by_room(self, db: AsyncSession, room_number: str) -> Optional[Guest]:
        """The current occupant of a room, if any."""
        query = select(Guest).where(
            Guest.room_number == room_number,
            Guest.check_out_time.is_(None),
        )
        return await self._first(db, query, "find_checked_in_by_room")

    async def is_room_occupied(self, db: AsyncSession, room_number: str) -> bool:
        query = select(
            exists().where(
                Guest.room_number == room_number,
                Guest.check_out_time.is_(None),
            )
        )
        async with self._guard("is_room_occupied"):
            result = await db.execute(query)
            return bool(result.scalar())

    async def list_checked_in(self, db: AsyncSession) -> List[Guest]:
        query = select(Guest).where(Guest.check_out_time.is_(None)).order_by(Guest.id)
        return await self._all(db, query, "list_checked_in")

    async def list_checked_out(self, db: AsyncSession) -> List[Guest]:
        query = select(Guest).where(Guest.check_out_time.is_not(None)).order_by(Guest.id)
        return await self._all(db, query, "list_checked_out")

    async def search_by_name(self, db: AsyncSession, fragment: str) -> List[Guest]:
        """Case-insensitive substring match on the guest name."""
        query = (
            select(Guest)
            .where(Guest.name.icontains(fragment, autoescape=True))
            .order_by(Guest.id)
        )
        return await self._all(db, query, "search_by_name")


guest_repository = GuestRepository()
