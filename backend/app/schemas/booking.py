"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """Schema for reserving a property.

    Date ordering and capacity are business rules checked by the booking
    service, not here. Timestamps without an offset are read as UTC.
    """

    property_id: uuid.UUID
    check_in_date: datetime
    check_out_date: datetime
    number_of_guests: int = Field(..., ge=1)
    special_requests: str | None = Field(None, max_length=500)


class BookingStatusUpdate(BaseModel):
    """Requested status change.

    ``status`` stays a plain string: unknown values are rejected by the state
    machine with the same error as any other illegal transition.
    """

    status: str
    cancellation_reason: str | None = Field(None, max_length=500)


class BookingCancel(BaseModel):
    cancellation_reason: str | None = Field(None, max_length=500)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertySummary(BaseModel):
    """Listing details shown alongside a booking."""

    id: uuid.UUID
    title: str
    images: list[str] | None = None
    city: str | None = None
    country: str | None = None
    price_per_night: Decimal
    check_in_time: str | None = None
    check_out_time: str | None = None

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """Contact card for the host or renter of a booking."""

    id: uuid.UUID
    name: str
    avatar_url: str | None = None
    email: str
    phone: str | None = None

    model_config = ConfigDict(from_attributes=True)


class BookingResponse(BaseModel):
    """Booking with display projections of its property, host and renter."""

    id: uuid.UUID
    property_id: uuid.UUID
    host_id: uuid.UUID
    renter_id: uuid.UUID
    check_in_date: datetime
    check_out_date: datetime
    number_of_guests: int
    number_of_nights: int
    total_price: Decimal
    status: str
    special_requests: str | None = None
    cancellation_reason: str | None = None
    canceled_at: datetime | None = None
    canceled_by: uuid.UUID | None = None
    created_at: datetime
    updated_at: datetime

    property: PropertySummary | None = None
    host: UserSummary | None = None
    renter: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class BookingData(BaseModel):
    booking: BookingResponse


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total: int
    has_next: bool
    has_prev: bool


class BookingListData(BaseModel):
    """One page of the caller's bookings."""

    bookings: list[BookingResponse]
    pagination: Pagination
