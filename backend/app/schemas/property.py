"""Pydantic v2 request/response schemas for property endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyCreate(BaseModel):
    """Schema for listing a new property."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    country: str | None = Field(None, max_length=100)
    images: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    rules: list[str] = Field(default_factory=list)
    max_guests: int = Field(..., ge=1)
    price_per_night: Decimal = Field(..., ge=0)
    check_in_time: str = Field("15:00", pattern=_TIME_PATTERN)
    check_out_time: str = Field("11:00", pattern=_TIME_PATTERN)
    is_active: bool = True


class PropertyUpdate(BaseModel):
    """Schema for partially updating a property. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=1000)
    address: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    country: str | None = Field(None, max_length=100)
    images: list[str] | None = None
    amenities: list[str] | None = None
    rules: list[str] | None = None
    max_guests: int | None = Field(None, ge=1)
    price_per_night: Decimal | None = Field(None, ge=0)
    check_in_time: str | None = Field(None, pattern=_TIME_PATTERN)
    check_out_time: str | None = Field(None, pattern=_TIME_PATTERN)
    is_active: bool | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertyResponse(BaseModel):
    """Public property information returned from the API."""

    id: uuid.UUID
    host_id: uuid.UUID
    title: str
    description: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    images: list[str] | None = None
    amenities: list[str] | None = None
    rules: list[str] | None = None
    max_guests: int
    price_per_night: Decimal
    check_in_time: str
    check_out_time: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PropertyData(BaseModel):
    property: PropertyResponse


class PropertyListData(BaseModel):
    """Paginated list of properties."""

    items: list[PropertyResponse]
    total: int
