"""
Hotel Parcel Tracking — Parcel Route Handlers
===============================================

What:  Parcel acceptance, collection and listing endpoints.

Status codes:
    The desk-facing mutations (accept, collect, collect by tracking number)
    answer 400 for every rejection, including a guest or parcel that does
    not exist: the clerk typed a bad reference. Lookups (GET by tracking
    number) keep 404 for a missing parcel.
"""

import logging
from typing import Awaitable, List, TypeVar

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracking.database import get_db_session
from parcel_tracking.exceptions import NotFoundError, ValidationError
from parcel_tracking.schemas.common import ErrorResponse
from parcel_tracking.schemas.parcel import ParcelAcceptRequest, ParcelResponse
from parcel_tracking.services.parcel_service import parcel_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/parcels", tags=["Parcels"])

T = TypeVar("T")


async def _reject_missing_as_bad_request(operation: Awaitable[T]) -> T:
    """Awaits a mutation, re-raising NotFoundError as a 400 ValidationError."""
    try:
        return await operation
    except NotFoundError as exc:
        raise ValidationError(message=exc.message, context=exc.context) from exc


@router.post(
    "/accept",
    status_code=201,
    response_model=ParcelResponse,
    responses={
        201: {"description": "Parcel accepted", "model": ParcelResponse},
        400: {
            "description": "Invalid input, guest not found, guest not checked in, or duplicate tracking number",
            "model": ErrorResponse,
        },
    },
    summary="Accept a parcel for a checked-in guest",
)
async def accept_parcel(
    payload: ParcelAcceptRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ParcelResponse:
    """Arrival time is set by the server; the parcel starts uncollected."""
    return await _reject_missing_as_bad_request(
        parcel_service.accept(
            db,
            tracking_number=payload.tracking_number,
            sender=payload.sender,
            description=payload.description,
            guest_id=payload.guest_id,
        )
    )


@router.put(
    "/tracking/{tracking_number}/collect",
    response_model=ParcelResponse,
    responses={400: {"description": "Parcel not found or already collected", "model": ErrorResponse}},
    summary="Collect a parcel by tracking number",
)
async def collect_by_tracking_number(
    tracking_number: str,
    db: AsyncSession = Depends(get_db_session),
) -> ParcelResponse:
    return await _reject_missing_as_bad_request(
        parcel_service.collect_by_tracking_number(db, tracking_number)
    )


@router.put(
    "/{parcel_id}/collect",
    response_model=ParcelResponse,
    responses={400: {"description": "Parcel not found or already collected", "model": ErrorResponse}},
    summary="Collect a parcel by ID",
)
async def collect_parcel(
    parcel_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> ParcelResponse:
    return await _reject_missing_as_bad_request(parcel_service.collect(db, parcel_id))


@router.get(
    "/guest/{guest_id}/available",
    response_model=List[ParcelResponse],
    summary="Uncollected parcels of a guest",
)
async def list_available_for_guest(
    guest_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[ParcelResponse]:
    return await parcel_service.list_available_for_guest(db, guest_id)


@router.get(
    "/guest/{guest_id}",
    response_model=List[ParcelResponse],
    summary="All parcels of a guest, collected or not",
)
async def list_for_guest(
    guest_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[ParcelResponse]:
    return await parcel_service.list_for_guest(db, guest_id)


@router.get(
    "/room/{room_number}/available",
    response_model=List[ParcelResponse],
    summary="Uncollected parcels of guests who stayed in a room",
)
async def list_available_for_room(
    room_number: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[ParcelResponse]:
    return await parcel_service.list_available_for_room(db, room_number)


@router.get(
    "/uncollected",
    response_model=List[ParcelResponse],
    summary="All uncollected parcels",
)
async def list_uncollected(db: AsyncSession = Depends(get_db_session)) -> List[ParcelResponse]:
    return await parcel_service.list_all_uncollected(db)


@router.get(
    "/collected",
    response_model=List[ParcelResponse],
    summary="All collected parcels",
)
async def list_collected(db: AsyncSession = Depends(get_db_session)) -> List[ParcelResponse]:
    return await parcel_service.list_collected(db)


@router.get(
    "/checked-in-guests",
    response_model=List[ParcelResponse],
    summary="Parcels of guests who are currently checked in",
)
async def list_for_checked_in_guests(db: AsyncSession = Depends(get_db_session)) -> List[ParcelResponse]:
    return await parcel_service.list_for_checked_in_guests(db)


@router.get(
    "",
    response_model=List[ParcelResponse],
    summary="List all parcels",
)
async def list_parcels(db: AsyncSession = Depends(get_db_session)) -> List[ParcelResponse]:
    return await parcel_service.list_all(db)


@router.get(
    "/tracking/{tracking_number}",
    response_model=ParcelResponse,
    responses={404: {"description": "Parcel not found", "model": ErrorResponse}},
    summary="Get a parcel by tracking number",
)
async def get_by_tracking_number(
    tracking_number: str,
    db: AsyncSession = Depends(get_db_session),
) -> ParcelResponse:
    return await parcel_service.get_by_tracking_number(db, tracking_number)
