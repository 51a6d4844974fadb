"""Availability checker: half-open interval overlap against active bookings."""

import uuid
from datetime import datetime

from app.domain.clock import as_utc
from app.services.booking_store import BookingStore


async def is_available(
    store: BookingStore,
    property_id: uuid.UUID,
    check_in: datetime,
    check_out: datetime,
) -> bool:
    """True if no pending or confirmed booking on the property overlaps ``[check_in, check_out)``.

    Ranges that only touch (one ends exactly when the other starts) do not
    overlap. Canceled and completed bookings never block. The answer reflects
    the live store; callers creating a booking should hold the property lock
    across this check and the insert.
    """
    return not await store.has_overlap(property_id, as_utc(check_in), as_utc(check_out))
