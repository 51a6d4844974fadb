"""Persistence boundary for the booking engine.

Every call is bounded by ``settings.store_timeout_seconds``. Driver errors and
timeouts are logged and re-raised as ``InternalError``; an integrity violation
on insert (the exclusion constraint on overlapping active bookings) is
re-raised as ``DateConflict``.
"""

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Iterable
from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy import exists, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import DateConflict, InternalError
from app.domain.booking_state import ACTIVE_STATUSES, BookingStatus
from app.models.booking import Booking
from app.models.property import Property

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgreSQL exclusion constraint, see alembic 0001_initial_schema.
OVERLAP_CONSTRAINT = "ex_bookings_no_overlap"


class BookingStore:
    """Thin async facade over an ``AsyncSession``."""

    def __init__(self, db: AsyncSession, timeout: float | None = None) -> None:
        self.db = db
        self.timeout = timeout if timeout is not None else settings.store_timeout_seconds

    async def _run(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("Store operation %s timed out after %ss", operation, self.timeout)
            raise InternalError(f"{operation} timed out after {self.timeout}s") from None
        except SQLAlchemyError as exc:
            logger.exception("Store operation %s failed", operation)
            raise InternalError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    async def get_property(self, property_id: uuid.UUID, *, lock: bool = False) -> Property | None:
        """Fetch a property; ``lock`` takes a row lock serializing writers on it."""
        query = select(Property).where(Property.id == property_id)
        if lock:
            query = query.with_for_update()

        async def _fetch() -> Property | None:
            result = await self.db.execute(query)
            return result.scalar_one_or_none()

        return await self._run("get_property", _fetch())

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    async def get_booking(self, booking_id: uuid.UUID) -> Booking | None:
        """Fetch a booking, always reloading its state from the database."""

        async def _fetch() -> Booking | None:
            result = await self.db.execute(
                select(Booking).where(Booking.id == booking_id).execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()

        return await self._run("get_booking", _fetch())

    async def has_overlap(
        self,
        property_id: uuid.UUID,
        check_in: datetime,
        check_out: datetime,
        statuses: Iterable[BookingStatus] = ACTIVE_STATUSES,
    ) -> bool:
        """True if any booking in ``statuses`` overlaps ``[check_in, check_out)``."""
        query = select(
            exists().where(
                Booking.property_id == property_id,
                Booking.status.in_([s.value for s in statuses]),
                Booking.check_in_date < check_out,
                Booking.check_out_date > check_in,
            )
        )

        async def _query() -> bool:
            result = await self.db.execute(query)
            return bool(result.scalar())

        return await self._run("has_overlap", _query())

    async def insert_booking(self, booking: Booking) -> Booking:
        async def _insert() -> Booking:
            self.db.add(booking)
            try:
                await self.db.flush()
            except IntegrityError as exc:
                if OVERLAP_CONSTRAINT not in str(exc.orig):
                    raise
                logger.info("Insert rejected by %s on property %s", OVERLAP_CONSTRAINT, booking.property_id)
                raise DateConflict() from exc
            result = await self.db.execute(
                select(Booking).where(Booking.id == booking.id).execution_options(populate_existing=True)
            )
            return result.scalar_one()

        return await self._run("insert_booking", _insert())

    async def update_booking_if_status(
        self,
        booking_id: uuid.UUID,
        expected_status: str,
        values: dict[str, Any],
    ) -> bool:
        """Compare-and-set: apply ``values`` only if the stored status is still ``expected_status``."""
        statement = (
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == expected_status)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        async def _update() -> bool:
            result = await self.db.execute(statement)
            return result.rowcount == 1

        return await self._run("update_booking_if_status", _update())

    async def list_bookings(
        self,
        *,
        renter_id: uuid.UUID | None = None,
        host_id: uuid.UUID | None = None,
        status: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        """Return one page of bookings matching the filters plus the total count."""
        filters = []
        if renter_id is not None:
            filters.append(Booking.renter_id == renter_id)
        if host_id is not None:
            filters.append(Booking.host_id == host_id)
        if status is not None:
            filters.append(Booking.status == status)

        async def _list() -> tuple[list[Booking], int]:
            count_query = select(func.count()).select_from(Booking).where(*filters)
            total = (await self.db.execute(count_query)).scalar_one()

            items_query = (
                select(Booking)
                .where(*filters)
                .order_by(Booking.created_at.desc(), Booking.check_in_date.desc())
                .offset(offset)
                .limit(limit)
            )
            result = await self.db.execute(items_query)
            return list(result.scalars().all()), total

        return await self._run("list_bookings", _list())
