"""
Hotel Parcel Tracking — Parcel Service Unit Tests
===================================================

What:  Tests for ParcelService business rules (accept, collect, projections).
How:   Guest and parcel repositories are patched with AsyncMocks.

What we test:
    ✅ Accepting a parcel for a checked-in guest
    ✅ Rejection for unknown, checked-out guests and duplicate tracking numbers
    ✅ Collection sets the collection time exactly once
    ✅ Collection is allowed after the owner checked out
    ✅ Projections map repository rows to responses
"""

import pytest
from unittest.mock import AsyncMock, patch

from sqlalchemy.exc import IntegrityError

from parcel_tracking.exceptions import ConflictError, NotFoundError
from parcel_tracking.services.parcel_service import ParcelService


GUEST_REPO = "parcel_tracking.services.parcel_service.guest_repository"
PARCEL_REPO = "parcel_tracking.services.parcel_service.parcel_repository"


async def _assign_id(db, entity):
    entity.id = 10
    return entity


class TestParcelServiceAccept:
    """Tests for the parcel acceptance workflow."""

    def setup_method(self):
        self.service = ParcelService()

    @pytest.mark.asyncio
    async def test_accept_success(self, mock_db_session, make_guest):
        guest = make_guest(guest_id=1, name="Alice", room_number="101")
        with patch(GUEST_REPO) as mock_guests, patch(PARCEL_REPO) as mock_parcels:
            mock_guests.get = AsyncMock(return_value=guest)
            mock_parcels.find_by_tracking_number = AsyncMock(return_value=None)
            mock_parcels.save = AsyncMock(side_effect=_assign_id)

            result = await self.service.accept(
                mock_db_session,
                tracking_number="TRK1",
                sender="DHL",
                guest_id=1,
                description="Small box",
            )

            assert result.id == 10
            assert result.tracking_number == "TRK1"
            assert result.sender == "DHL"
            assert result.description == "Small box"
            assert result.collected is False
            assert result.collection_time is None
            assert result.arrival_time is not None
            assert result.guest_id == 1
            assert result.guest_name == "Alice"
            assert result.guest_room_number == "101"
            assert len(guest.parcels) == 1

    @pytest.mark.asyncio
    async def test_accept_unknown_guest_raises_not_found(self, mock_db_session):
        with patch(GUEST_REPO) as mock_guests, patch(PARCEL_REPO) as mock_parcels:
            mock_guests.get = AsyncMock(return_value=None)
            mock_parcels.save = AsyncMock()

            with pytest.raises(NotFoundError):
                await self.service.accept(mock_db_session, "TRK1", "DHL", guest_id=99)

            mock_parcels.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_accept_for_checked_out_guest_raises_conflict(self, mock_db_session, make_guest):
        with patch(GUEST_REPO) as mock_guests, patch(PARCEL_REPO) as mock_parcels:
            mock_guests.get = AsyncMock(return_value=make_guest(name="Alice", checked_out=True))
            mock_parcels.find_by_tracking_number = AsyncMock(return_value=None)
            mock_parcels.save = AsyncMock()

            with pytest.raises(ConflictError) as exc_info:
                await self.service.accept(mock_db_session, "TRK1", "DHL", guest_id=1)

            assert exc_info.value.message == (
                "Cannot accept parcel for guest who is not checked in: Alice"
            )
            mock_parcels.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_accept_duplicate_tracking_number_raises_conflict(
        self, mock_db_session, make_guest, make_parcel
    ):
        guest = make_guest()
        existing = make_parcel(make_guest(guest_id=2, name="Bob", room_number="102"), collected=True)
        with patch(GUEST_REPO) as mock_guests, patch(PARCEL_REPO) as mock_parcels:
            mock_guests.get = AsyncMock(return_value=guest)
            mock_parcels.find_by_tracking_number = AsyncMock(return_value=existing)
            mock_parcels.save = AsyncMock()

            with pytest.raises(ConflictError) as exc_info:
                await self.service.accept(mock_db_session, "TRK1", "DHL", guest_id=1)

            assert exc_info.value.message == "Parcel with tracking number TRK1 already exists"
            mock_parcels.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_accept_unique_constraint_violation_raises_conflict(self, mock_db_session, make_guest):
        with patch(GUEST_REPO) as mock_guests, patch(PARCEL_REPO) as mock_parcels:
            mock_guests.get = AsyncMock(return_value=make_guest())
            mock_parcels.find_by_tracking_number = AsyncMock(return_value=None)
            mock_parcels.save = AsyncMock(
                side_effect=IntegrityError("INSERT INTO parcels", {}, Exception("UNIQUE constraint failed"))
            )

            with pytest.raises(ConflictError) as exc_info:
                await self.service.accept(mock_db_session, "TRK1", "DHL", guest_id=1)

            assert "already exists" in exc_info.value.message


class TestParcelServiceCollect:
    """Tests for the collection workflow."""

    def setup_method(self):
        self.service = ParcelService()

    @pytest.mark.asyncio
    async def test_collect_success(self, mock_db_session, make_guest, make_parcel):
        parcel = make_parcel(make_guest())
        with patch(PARCEL_REPO) as mock_parcels:
            mock_parcels.get = AsyncMock(return_value=parcel)
            mock_parcels.save = AsyncMock(side_effect=lambda db, entity: entity)

            result = await self.service.collect(mock_db_session, 1)

            assert result.collected is True
            assert result.collection_time is not None
            assert parcel.collected is True

    @pytest.mark.asyncio
    async def test_collect_after_owner_checked_out(self, mock_db_session, make_guest, make_parcel):
        parcel = make_parcel(make_guest(checked_out=True))
        with patch(PARCEL_REPO) as mock_parcels:
            mock_parcels.get = AsyncMock(return_value=parcel)
            mock_parcels.save = AsyncMock(side_effect=lambda db, entity: entity)

            result = await self.service.collect(mock_db_session, 1)

            assert result.collected is True

    @pytest.mark.asyncio
    async def test_collect_twice_raises_conflict(self, mock_db_session, make_guest, make_parcel):
        parcel = make_parcel(make_guest(), collected=True)
        original_time = parcel.collection_time
        with patch(PARCEL_REPO) as mock_parcels:
            mock_parcels.get = AsyncMock(return_value=parcel)
            mock_parcels.save = AsyncMock()

            with pytest.raises(ConflictError) as exc_info:
                await self.service.collect(mock_db_session, 1)

            assert exc_info.value.message == "Parcel is already collected"
            assert parcel.collection_time == original_time
            mock_parcels.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_collect_unknown_parcel_raises_not_found(self, mock_db_session):
        with patch(PARCEL_REPO) as mock_parcels:
            mock_parcels.get = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await self.service.collect(mock_db_session, 5)

            assert exc_info.value.resource == "Parcel"

    @pytest.mark.asyncio
    async def test_collect_by_tracking_number(self, mock_db_session, make_guest, make_parcel):
        parcel = make_parcel(make_guest(), parcel_id=3, tracking_number="TRK9")
        with patch(PARCEL_REPO) as mock_parcels:
            mock_parcels.find_by_tracking_number = AsyncMock(return_value=parcel)
            mock_parcels.get = AsyncMock(return_value=parcel)
            mock_parcels.save = AsyncMock(side_effect=lambda db, entity: entity)

            result = await self.service.collect_by_tracking_number(mock_db_session, "TRK9")

            assert result.id == 3
            assert result.collected is True
            mock_parcels.get.assert_awaited_once_with(mock_db_session, 3)

    @pytest.mark.asyncio
    async def test_collect_by_unknown_tracking_number(self, mock_db_session):
        with patch(PARCEL_REPO) as mock_parcels:
            mock_parcels.find_by_tracking_number = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await self.service.collect_by_tracking_number(mock_db_session, "NOPE")

            assert "tracking number 'NOPE'" in exc_info.value.message


class TestParcelServiceProjections:
    """The list operations pass through to the matching repository query."""

    def setup_method(self):
        self.service = ParcelService()

    @pytest.mark.asyncio
    async def test_list_available_for_room(self, mock_db_session, make_guest, make_parcel):
        parcels = [
            make_parcel(make_guest(guest_id=1), parcel_id=1, tracking_number="TRK1"),
            make_parcel(make_guest(guest_id=2, checked_out=True), parcel_id=2, tracking_number="TRK2"),
        ]
        with patch(PARCEL_REPO) as mock_parcels:
            mock_parcels.list_uncollected_by_room = AsyncMock(return_value=parcels)

            result = await self.service.list_available_for_room(mock_db_session, "101")

            assert [p.tracking_number for p in result] == ["TRK1", "TRK2"]
            mock_parcels.list_uncollected_by_room.assert_awaited_once_with(mock_db_session, "101")

    @pytest.mark.asyncio
    async def test_list_available_for_guest(self, mock_db_session, make_guest, make_parcel):
        guest = make_guest(guest_id=4)
        with patch(PARCEL_REPO) as mock_parcels:
            mock_parcels.list_uncollected_by_guest = AsyncMock(return_value=[make_parcel(guest)])

            result = await self.service.list_available_for_guest(mock_db_session, 4)

            assert result[0].guest_id == 4
            mock_parcels.list_uncollected_by_guest.assert_awaited_once_with(mock_db_session, 4)

    @pytest.mark.asyncio
    async def test_list_all_uncollected_empty(self, mock_db_session):
        with patch(PARCEL_REPO) as mock_parcels:
            mock_parcels.list_uncollected = AsyncMock(return_value=[])

            assert await self.service.list_all_uncollected(mock_db_session) == []

    @pytest.mark.asyncio
    async def test_get_by_tracking_number_not_found(self, mock_db_session):
        with patch(PARCEL_REPO) as mock_parcels:
            mock_parcels.find_by_tracking_number = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError):
                await self.service.get_by_tracking_number(mock_db_session, "TRK404")
