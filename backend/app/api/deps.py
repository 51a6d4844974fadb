"""Shared API dependencies: single import point for all routers.

Re-exports database session, authentication and clock dependencies so that
router modules can import everything they need from one place::

    from app.api.deps import get_clock, get_db, get_optional_user
"""

from datetime import datetime

from app.auth.dependencies import (
    get_current_host,
    get_current_user,
    get_optional_user,
)
from app.database import get_db
from app.domain.clock import utc_now


def get_clock() -> datetime:
    """Current UTC time for the request. Tests override this dependency."""
    return utc_now()


__all__ = [
    "get_clock",
    "get_db",
    "get_current_host",
    "get_current_user",
    "get_optional_user",
]
