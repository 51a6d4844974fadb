"""Shared test configuration and fixtures.

Each test gets a fresh in-memory SQLite database (aiosqlite) with all tables
created from the models, and a FastAPI client whose ``get_db`` and
``get_clock`` dependencies are overridden to use that database and a fixed
clock.
"""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-the-test-suite-only")

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401  (registers every table on Base.metadata)
from app.api.deps import get_clock
from app.auth.jwt import create_token_pair
from app.auth.passwords import hash_password
from app.database import Base, get_db
from app.domain.booking_state import BookingStatus
from app.main import app
from app.models.booking import Booking
from app.models.property import Property
from app.models.user import User

# Fixed "now" for every API request and service call in the suite.
NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def jan(day: int, hour: int = 0) -> datetime:
    """A UTC timestamp in January 2026, after ``NOW``."""
    return datetime(2026, 1, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture(name="jan")
def jan_fixture() -> Callable[..., datetime]:
    return jan


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a private in-memory database with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSession(test_engine, expire_on_commit=False) as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the test DB session and fixed clock."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: NOW

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def _create_user(db_session: AsyncSession, role: str, name: str) -> User:
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"{role}-{unique}@test.com",
        hashed_password=hash_password("testpass123"),
        name=name,
        role=role,
        phone="+15550000000",
        is_active=True,
    )
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


def _headers(user: User) -> dict[str, str]:
    tokens = create_token_pair(str(user.id), user.role)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest_asyncio.fixture
async def host(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "host", "Test Host")


@pytest_asyncio.fixture
async def renter(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "renter", "Test Renter")


@pytest_asyncio.fixture
async def other_renter(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "renter", "Another Renter")


@pytest_asyncio.fixture
async def other_host(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "host", "Another Host")


@pytest.fixture
def host_headers(host: User) -> dict[str, str]:
    return _headers(host)


@pytest.fixture
def renter_headers(renter: User) -> dict[str, str]:
    return _headers(renter)


@pytest.fixture
def other_renter_headers(other_renter: User) -> dict[str, str]:
    return _headers(other_renter)


@pytest.fixture
def other_host_headers(other_host: User) -> dict[str, str]:
    return _headers(other_host)


# ---------------------------------------------------------------------------
# Properties and bookings
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def listing(db_session: AsyncSession, host: User) -> Property:
    """An active property at 100/night for up to 4 guests."""
    prop = Property(
        host_id=host.id,
        title="Test Cottage",
        description="A cottage for automated tests.",
        city="Lisbon",
        country="Portugal",
        images=["https://img.test/cottage.jpg"],
        max_guests=4,
        price_per_night=Decimal("100.00"),
        is_active=True,
    )
    db_session.add(prop)
    await db_session.flush()
    await db_session.refresh(prop)
    return prop


MakeBooking = Callable[..., Awaitable[Booking]]


@pytest.fixture
def make_booking(db_session: AsyncSession, listing: Property, renter: User) -> MakeBooking:
    """Insert a booking row directly, bypassing the service (e.g. to seed a pending one)."""

    async def _make(
        check_in: datetime = jan(10),
        check_out: datetime = jan(13),
        status: BookingStatus = BookingStatus.CONFIRMED,
        prop: Property | None = None,
        booking_renter: User | None = None,
        guests: int = 2,
    ) -> Booking:
        prop = prop or listing
        nights = (check_out - check_in) // timedelta(days=1)
        booking = Booking(
            property_id=prop.id,
            host_id=prop.host_id,
            renter_id=(booking_renter or renter).id,
            check_in_date=check_in,
            check_out_date=check_out,
            number_of_guests=guests,
            total_price=prop.price_per_night * nights,
            status=status.value,
        )
        db_session.add(booking)
        await db_session.flush()
        await db_session.refresh(booking)
        return booking

    return _make
