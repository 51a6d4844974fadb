"""Who may see or change a booking: its host and its renter, nobody else."""

from app.models.booking import Booking
from app.models.user import User


def is_party(actor: User, booking: Booking) -> bool:
    return actor.id in (booking.host_id, booking.renter_id)


def can_view(actor: User, booking: Booking) -> bool:
    return is_party(actor, booking)


def can_modify(actor: User, booking: Booking) -> bool:
    return is_party(actor, booking)
