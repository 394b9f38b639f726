"""
Hotel Parcel Tracking — Guest Route Handlers
==============================================

What:  Check-in, check-out and guest lookup endpoints.
How:   Extracts path/body/query data, delegates to GuestService, returns JSON.
       Rule violations raised by the service are turned into 400/404
       responses by the global exception handlers in main.py.

Route order matters: the literal paths (/checked-in, /room/...) are declared
before /{guest_id} so they are never captured as an ID.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracking.database import get_db_session
from parcel_tracking.schemas.common import ErrorResponse
from parcel_tracking.schemas.guest import GuestCheckInRequest, GuestResponse
from parcel_tracking.services.guest_service import guest_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/guests", tags=["Guests"])


@router.post(
    "/check-in",
    status_code=201,
    response_model=GuestResponse,
    responses={
        201: {"description": "Guest checked in", "model": GuestResponse},
        400: {"description": "Invalid input or room already occupied", "model": ErrorResponse},
    },
    summary="Check in a guest",
)
async def check_in(
    payload: GuestCheckInRequest,
    db: AsyncSession = Depends(get_db_session),
) -> GuestResponse:
    """Registers a new guest in a free room. Check-in time is set by the server."""
    return await guest_service.check_in(db, name=payload.name, room_number=payload.room_number)


@router.put(
    "/{guest_id}/check-out",
    response_model=GuestResponse,
    responses={
        400: {"description": "Guest already checked out", "model": ErrorResponse},
        404: {"description": "Guest not found", "model": ErrorResponse},
    },
    summary="Check out a guest by ID",
)
async def check_out(
    guest_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> GuestResponse:
    return await guest_service.check_out(db, guest_id)


@router.put(
    "/room/{room_number}/check-out",
    response_model=GuestResponse,
    responses={
        400: {"description": "Guest already checked out", "model": ErrorResponse},
        404: {"description": "No checked-in guest in this room", "model": ErrorResponse},
    },
    summary="Check out the current occupant of a room",
)
async def check_out_by_room(
    room_number: str,
    db: AsyncSession = Depends(get_db_session),
) -> GuestResponse:
    return await guest_service.check_out_by_room(db, room_number)


@router.get(
    "/checked-in",
    response_model=List[GuestResponse],
    summary="List guests currently checked in",
)
async def list_checked_in(db: AsyncSession = Depends(get_db_session)) -> List[GuestResponse]:
    return await guest_service.list_checked_in(db)


@router.get(
    "/checked-out",
    response_model=List[GuestResponse],
    summary="List guests who have checked out",
)
async def list_checked_out(db: AsyncSession = Depends(get_db_session)) -> List[GuestResponse]:
    return await guest_service.list_checked_out(db)


@router.get(
    "/search",
    response_model=List[GuestResponse],
    responses={400: {"description": "Missing or blank search term", "model": ErrorResponse}},
    summary="Search guests by name",
)
async def search_guests(
    name: str = Query(..., min_length=1, max_length=255, description="Case-insensitive name fragment"),
    db: AsyncSession = Depends(get_db_session),
) -> List[GuestResponse]:
    return await guest_service.search_by_name(db, name)


@router.get(
    "",
    response_model=List[GuestResponse],
    summary="List all guests",
)
async def list_guests(db: AsyncSession = Depends(get_db_session)) -> List[GuestResponse]:
    return await guest_service.list_all(db)


@router.get(
    "/room/{room_number}/status",
    response_model=bool,
    summary="Whether a room currently has a checked-in guest",
)
async def room_status(
    room_number: str,
    db: AsyncSession = Depends(get_db_session),
) -> bool:
    return await guest_service.is_checked_in_by_room(db, room_number)


@router.get(
    "/room/{room_number}",
    response_model=GuestResponse,
    responses={404: {"description": "No checked-in guest in this room", "model": ErrorResponse}},
    summary="Get the current occupant of a room",
)
async def get_room_occupant(
    room_number: str,
    db: AsyncSession = Depends(get_db_session),
) -> GuestResponse:
    return await guest_service.get_checked_in_by_room(db, room_number)


@router.get(
    "/{guest_id}",
    response_model=GuestResponse,
    responses={404: {"description": "Guest not found", "model": ErrorResponse}},
    summary="Get a guest by ID",
)
async def get_guest(
    guest_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> GuestResponse:
    return await guest_service.get_by_id(db, guest_id)
