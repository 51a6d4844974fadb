"""Cancellation policy domain logic.

A booking may be canceled only while check-in is strictly more than the
cutoff (24 hours by default) away. Exactly at the cutoff the window is closed,
and so it is once check-in has passed.
"""

from datetime import datetime, timedelta

from app.core.exceptions import AlreadyCanceled, CancellationWindowClosed, Immutable
from app.domain.booking_state import BookingStatus
from app.domain.clock import as_utc

DEFAULT_CUTOFF_HOURS = 24


def is_within_cancellation_window(
    check_in_date: datetime,
    now: datetime,
    cutoff_hours: int = DEFAULT_CUTOFF_HOURS,
) -> bool:
    """Return True while cancellation is still allowed."""
    return as_utc(check_in_date) - as_utc(now) > timedelta(hours=cutoff_hours)


def assert_cancellable(
    status: str,
    check_in_date: datetime,
    now: datetime,
    cutoff_hours: int = DEFAULT_CUTOFF_HOURS,
) -> None:
    """Apply the cancellation rules in order.

    Raises:
        AlreadyCanceled: The booking is already canceled.
        Immutable: The booking is completed.
        CancellationWindowClosed: Check-in is within ``cutoff_hours`` of ``now``.
    """
    if status == BookingStatus.CANCELED:
        raise AlreadyCanceled()
    if status == BookingStatus.COMPLETED:
        raise Immutable()
    if not is_within_cancellation_window(check_in_date, now, cutoff_hours):
        raise CancellationWindowClosed(
            f"Cannot cancel booking within {cutoff_hours} hours of check-in"
        )
