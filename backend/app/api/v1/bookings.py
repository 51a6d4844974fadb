"""Bookings API router.

Access rule: a booking is visible to, and changeable by, its host and its
renter only. Business rules live in ``app.services.booking_service``; this
module only translates HTTP to service calls and wraps results in the
response envelope.
"""

from __future__ import annotations

import math
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_clock, get_db, get_optional_user
from app.config import settings
from app.models.user import User
from app.schemas.booking import (
    BookingCancel,
    BookingCreate,
    BookingData,
    BookingListData,
    BookingResponse,
    BookingStatusUpdate,
    Pagination,
)
from app.schemas.common import ApiResponse
from app.services import booking_service

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


def _envelope(booking, message: str | None = None) -> ApiResponse[BookingData]:
    return ApiResponse[BookingData](
        message=message,
        data=BookingData(booking=BookingResponse.model_validate(booking)),
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=ApiResponse[BookingData],
    status_code=status.HTTP_201_CREATED,
    summary="Reserve a property",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
    now: datetime = Depends(get_clock),
) -> ApiResponse[BookingData]:
    """Create a confirmed booking for the authenticated renter.

    Validates, in order: renter role, check-in not in the past, check-out after
    check-in, property exists and is active, guest count, and that no pending
    or confirmed booking overlaps the requested dates.
    """
    booking = await booking_service.create_booking(
        db,
        current_user,
        property_id=body.property_id,
        check_in=body.check_in_date,
        check_out=body.check_out_date,
        guests=body.number_of_guests,
        special_requests=body.special_requests,
        now=now,
    )
    return _envelope(booking, "Booking created successfully")


@router.get(
    "",
    response_model=ApiResponse[BookingListData],
    summary="List the current user's bookings",
)
async def list_bookings(
    status_filter: str | None = Query(None, alias="status", description="Filter by booking status"),
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(
        settings.bookings_page_size,
        ge=1,
        le=settings.bookings_max_page_size,
        description="Page size",
    ),
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
) -> ApiResponse[BookingListData]:
    """Renters get the bookings they made; hosts get bookings on their properties."""
    items, total = await booking_service.list_bookings_for_user(
        db,
        current_user,
        status=status_filter,
        page=page,
        page_size=limit,
    )
    total_pages = math.ceil(total / limit)
    return ApiResponse[BookingListData](
        data=BookingListData(
            bookings=[BookingResponse.model_validate(b) for b in items],
            pagination=Pagination(
                current_page=page,
                total_pages=total_pages,
                total=total,
                has_next=page < total_pages,
                has_prev=page > 1,
            ),
        )
    )


@router.get(
    "/{booking_id}",
    response_model=ApiResponse[BookingData],
    summary="Get a booking",
)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
) -> ApiResponse[BookingData]:
    booking = await booking_service.get_booking(db, current_user, booking_id)
    return _envelope(booking)


@router.put(
    "/{booking_id}/status",
    response_model=ApiResponse[BookingData],
    summary="Change a booking's status",
)
async def update_booking_status(
    booking_id: uuid.UUID,
    body: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
    now: datetime = Depends(get_clock),
) -> ApiResponse[BookingData]:
    """Apply a status transition allowed by the booking state machine."""
    booking = await booking_service.update_booking_status(
        db,
        current_user,
        booking_id,
        body.status,
        cancellation_reason=body.cancellation_reason,
        now=now,
    )
    return _envelope(booking, f"Booking {booking.status} successfully")


@router.put(
    "/{booking_id}/cancel",
    response_model=ApiResponse[BookingData],
    summary="Cancel a booking",
)
async def cancel_booking(
    booking_id: uuid.UUID,
    body: BookingCancel | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
    now: datetime = Depends(get_clock),
) -> ApiResponse[BookingData]:
    """Cancel a booking more than 24 hours before check-in."""
    booking = await booking_service.cancel_booking(
        db,
        current_user,
        booking_id,
        cancellation_reason=body.cancellation_reason if body else None,
        now=now,
    )
    return _envelope(booking, "Booking canceled successfully")
