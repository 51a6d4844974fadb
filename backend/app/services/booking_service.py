"""Booking service: creation, lookup, status transitions and cancellation.

Checks run in one fixed order for every operation: authentication, then
existence, then authorization, then business rules. ``now`` is always passed
in by the caller.
"""

import logging
import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    CapacityExceeded,
    DateConflict,
    Forbidden,
    InvalidDateRange,
    InvalidTransition,
    NotFound,
    PropertyUnavailable,
    Unauthenticated,
)
from app.domain.access import can_modify, can_view
from app.domain.booking_state import BookingStatus, assert_booking_transition
from app.domain.cancellation_policy import assert_cancellable
from app.domain.clock import as_utc
from app.domain.pricing import calculate_total_price
from app.models.booking import Booking
from app.models.user import User
from app.services.availability import is_available
from app.services.booking_store import BookingStore

logger = logging.getLogger(__name__)


def _require_actor(actor: User | None) -> User:
    if actor is None:
        raise Unauthenticated()
    return actor


async def _load_booking(store: BookingStore, booking_id: uuid.UUID) -> Booking:
    booking = await store.get_booking(booking_id)
    if booking is None:
        raise NotFound("Booking")
    return booking


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


async def create_booking(
    db: AsyncSession,
    actor: User | None,
    *,
    property_id: uuid.UUID,
    check_in: datetime,
    check_out: datetime,
    guests: int,
    special_requests: str | None = None,
    now: datetime,
) -> Booking:
    """Validate a reservation request and persist it as a confirmed booking.

    Raises:
        Forbidden: The actor is missing or is not a renter.
        InvalidDateRange: Check-in is in the past, or check-out is not after it.
        NotFound: The property does not exist.
        PropertyUnavailable: The property is inactive.
        CapacityExceeded: More guests than the property allows.
        DateConflict: An active booking overlaps the range.
        InternalError: The store failed or timed out.
    """
    if actor is None or not actor.is_renter:
        raise Forbidden("Only renters can create bookings")

    check_in = as_utc(check_in)
    check_out = as_utc(check_out)
    now = as_utc(now)

    if check_in < now:
        raise InvalidDateRange("Check-in date cannot be in the past")
    if check_out <= check_in:
        raise InvalidDateRange("Check-out date must be after check-in date")

    store = BookingStore(db)

    # The row lock is held until the request transaction ends, so concurrent
    # requests for the same property check and insert one at a time. Dialects
    # without FOR UPDATE (SQLite) compile it away.
    prop = await store.get_property(property_id, lock=True)
    if prop is None:
        raise NotFound("Property")
    if not prop.is_active:
        raise PropertyUnavailable()
    if guests > prop.max_guests:
        raise CapacityExceeded(prop.max_guests)

    if not await is_available(store, property_id, check_in, check_out):
        logger.info(
            "Rejected booking on property %s for %s..%s: dates taken",
            property_id,
            check_in.isoformat(),
            check_out.isoformat(),
        )
        raise DateConflict()

    booking = Booking(
        property_id=prop.id,
        host_id=prop.host_id,
        renter_id=actor.id,
        check_in_date=check_in,
        check_out_date=check_out,
        number_of_guests=guests,
        total_price=calculate_total_price(check_in, check_out, prop.price_per_night),
        status=BookingStatus.CONFIRMED.value,
        special_requests=special_requests,
    )
    booking = await store.insert_booking(booking)

    logger.info(
        "Created booking %s on property %s for renter %s (%d nights, total %s)",
        booking.id,
        prop.id,
        actor.id,
        booking.number_of_nights,
        booking.total_price,
    )
    return booking


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def get_booking(db: AsyncSession, actor: User | None, booking_id: uuid.UUID) -> Booking:
    """Return a booking visible to the actor (its host or renter)."""
    actor = _require_actor(actor)
    booking = await _load_booking(BookingStore(db), booking_id)
    if not can_view(actor, booking):
        raise Forbidden("You do not have permission to view this booking")
    return booking


async def list_bookings_for_user(
    db: AsyncSession,
    actor: User | None,
    *,
    status: str | None = None,
    page: int = 1,
    page_size: int | None = None,
) -> tuple[list[Booking], int]:
    """Return ``(items, total)`` for the actor's bookings, newest first.

    Renters see bookings they made; hosts see bookings on their properties.
    """
    actor = _require_actor(actor)
    page = max(page, 1)
    page_size = min(page_size or settings.bookings_page_size, settings.bookings_max_page_size)

    filters: dict[str, uuid.UUID] = {}
    if actor.is_host:
        filters["host_id"] = actor.id
    else:
        filters["renter_id"] = actor.id

    return await BookingStore(db).list_bookings(
        **filters,
        status=status,
        offset=(page - 1) * page_size,
        limit=page_size,
    )


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


async def _apply_transition(
    store: BookingStore,
    actor: User,
    booking: Booking,
    target: BookingStatus,
    *,
    cancellation_reason: str | None,
    now: datetime,
) -> Booking:
    """Write ``target`` if the stored status still equals what we validated against."""
    previous = booking.status
    values: dict = {"status": target.value}
    if target is BookingStatus.CANCELED:
        values.update(
            cancellation_reason=cancellation_reason,
            canceled_at=as_utc(now),
            canceled_by=actor.id,
        )

    if not await store.update_booking_if_status(booking.id, previous, values):
        # Lost a race with another transition; report against what is stored now.
        current = await _load_booking(store, booking.id)
        raise InvalidTransition(current.status, target.value)

    updated = await _load_booking(store, booking.id)
    logger.info("Booking %s: %s -> %s by user %s", booking.id, previous, target.value, actor.id)
    return updated


async def update_booking_status(
    db: AsyncSession,
    actor: User | None,
    booking_id: uuid.UUID,
    new_status: str,
    *,
    cancellation_reason: str | None = None,
    now: datetime,
) -> Booking:
    """Move a booking to ``new_status`` if the transition table allows it.

    Only the booking's host may confirm a pending booking.
    """
    actor = _require_actor(actor)
    store = BookingStore(db)
    booking = await _load_booking(store, booking_id)

    if not can_modify(actor, booking):
        raise Forbidden("You do not have permission to modify this booking")

    target = assert_booking_transition(booking.status, new_status)

    if target is BookingStatus.CONFIRMED and actor.id != booking.host_id:
        raise Forbidden("Only hosts can confirm bookings")

    return await _apply_transition(
        store,
        actor,
        booking,
        target,
        cancellation_reason=cancellation_reason if target is BookingStatus.CANCELED else None,
        now=now,
    )


async def cancel_booking(
    db: AsyncSession,
    actor: User | None,
    booking_id: uuid.UUID,
    *,
    cancellation_reason: str | None = None,
    now: datetime,
) -> Booking:
    """Cancel a booking, enforcing the cutoff before check-in.

    Raises:
        Unauthenticated, NotFound, Forbidden: As for ``update_booking_status``.
        AlreadyCanceled: The booking is already canceled.
        Immutable: The booking is completed.
        CancellationWindowClosed: Check-in is within the cutoff.
    """
    actor = _require_actor(actor)
    store = BookingStore(db)
    booking = await _load_booking(store, booking_id)

    if not can_modify(actor, booking):
        raise Forbidden("You do not have permission to cancel this booking")

    assert_cancellable(
        booking.status,
        booking.check_in_date,
        now,
        cutoff_hours=settings.cancellation_cutoff_hours,
    )
    target = assert_booking_transition(booking.status, BookingStatus.CANCELED.value)

    return await _apply_transition(
        store,
        actor,
        booking,
        target,
        cancellation_reason=cancellation_reason,
        now=now,
    )
