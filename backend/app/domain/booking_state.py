"""Booking state machine."""

from enum import Enum

from app.core.exceptions import InvalidTransition


class BookingStatus(str, Enum):
    """Lifecycle states of a booking."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"
    COMPLETED = "completed"


BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELED, BookingStatus.COMPLETED}),
    BookingStatus.CANCELED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}

# Bookings in these states hold their dates against new reservations.
ACTIVE_STATUSES: frozenset[BookingStatus] = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


def _value(status: "str | BookingStatus") -> str:
    return status.value if isinstance(status, BookingStatus) else str(status)


def can_transition(current: str, target: str) -> bool:
    """Return True if ``current -> target`` is in the adjacency table.

    Unknown status strings on either side are never valid.
    """
    try:
        current_status = BookingStatus(current)
        target_status = BookingStatus(target)
    except ValueError:
        return False
    return target_status in BOOKING_TRANSITIONS[current_status]


def assert_booking_transition(current: str, target: str) -> BookingStatus:
    """Validate a requested transition and return the target as a ``BookingStatus``.

    Raises:
        InvalidTransition: For every pair not allowed by ``BOOKING_TRANSITIONS``,
            including self-transitions and unrecognised values.
    """
    if not can_transition(current, target):
        raise InvalidTransition(_value(current), _value(target))
    return BookingStatus(_value(target))
