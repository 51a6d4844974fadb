"""Flat per-night pricing."""

import math
from datetime import datetime
from decimal import Decimal

from app.domain.clock import as_utc

SECONDS_PER_DAY = 86400


def count_nights(check_in: datetime, check_out: datetime) -> int:
    """Number of nights in ``[check_in, check_out)``, rounded up to whole days.

    Day-aligned timestamps give the plain calendar difference: a stay from the
    1st to the 4th is 3 nights.
    """
    elapsed = as_utc(check_out) - as_utc(check_in)
    return math.ceil(elapsed.total_seconds() / SECONDS_PER_DAY)


def calculate_total_price(check_in: datetime, check_out: datetime, price_per_night: Decimal) -> Decimal:
    return Decimal(count_nights(check_in, check_out)) * Decimal(price_per_night)
