"""Seed the database with demo hosts, renters, listings and bookings.

Bookings are created through the booking service, so every seeded
reservation has passed the same availability and pricing rules as one made
over the API.

Run inside Docker:
    docker compose exec backend python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from app.auth.passwords import hash_password
from app.database import async_session_factory, engine
from app.domain.booking_state import BookingStatus
from app.domain.clock import utc_now
from app.models.booking import Booking
from app.models.property import Property
from app.models.user import User
from app.services import booking_service

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_PASSWORD = "demo1234"

HOSTS = [
    {"email": "maria.host@staybook.dev", "name": "Maria Lopez", "phone": "+34600111222"},
    {"email": "kenji.host@staybook.dev", "name": "Kenji Sato", "phone": "+81901234567"},
]

RENTERS = [
    {"email": "alex.renter@staybook.dev", "name": "Alex Morgan", "phone": "+15551230001"},
    {"email": "priya.renter@staybook.dev", "name": "Priya Nair", "phone": "+447700900123"},
]

# (host index, property data)
PROPERTIES = [
    (
        0,
        {
            "title": "Sunny Loft near the Old Town",
            "description": "Top-floor loft with a roof terrace, five minutes from the cathedral.",
            "address": "Calle Mayor 12",
            "city": "Seville",
            "country": "Spain",
            "images": ["https://images.staybook.dev/seville-loft-1.jpg"],
            "amenities": ["wifi", "ac", "kitchen", "terrace"],
            "rules": ["No smoking", "No parties"],
            "max_guests": 3,
            "price_per_night": Decimal("95.00"),
        },
    ),
    (
        0,
        {
            "title": "Family House with Garden",
            "description": "Three bedrooms, a shaded garden and parking for two cars.",
            "address": "Avenida de la Paz 48",
            "city": "Seville",
            "country": "Spain",
            "images": ["https://images.staybook.dev/seville-house-1.jpg"],
            "amenities": ["wifi", "parking", "garden", "washer"],
            "rules": ["Quiet hours after 22:00"],
            "max_guests": 6,
            "price_per_night": Decimal("180.00"),
        },
    ),
    (
        1,
        {
            "title": "Machiya Townhouse",
            "description": "Restored wooden townhouse in a quiet lane near Gion.",
            "address": "Higashiyama-ku 3-21",
            "city": "Kyoto",
            "country": "Japan",
            "images": ["https://images.staybook.dev/kyoto-machiya-1.jpg"],
            "amenities": ["wifi", "tatami", "tea_set"],
            "rules": ["Shoes off indoors"],
            "max_guests": 4,
            "price_per_night": Decimal("220.00"),
            "check_in_time": "16:00",
            "check_out_time": "10:00",
        },
    ),
]

# (renter index, property index, days from today, nights, guests, final status, special requests)
BOOKINGS = [
    (0, 0, 14, 3, 2, BookingStatus.CONFIRMED, "Arriving by train around 18:00"),
    (1, 0, 17, 4, 1, BookingStatus.CONFIRMED, None),
    (0, 1, 30, 7, 5, BookingStatus.CONFIRMED, "Travel cot for a toddler, please"),
    (1, 2, 21, 5, 2, BookingStatus.CANCELED, None),
    (0, 2, 45, 2, 2, BookingStatus.CONFIRMED, None),
]


def _at_check_in(day_offset: int) -> datetime:
    day = (utc_now() + timedelta(days=day_offset)).date()
    return datetime.combine(day, time(15, 0), tzinfo=timezone.utc)


async def seed() -> None:
    """Create demo users, properties and bookings."""
    async with async_session_factory() as session:
        # ------------------------------------------------------------------
        # 0. Clear previous demo data
        # ------------------------------------------------------------------
        emails = [u["email"] for u in HOSTS + RENTERS]
        existing = (await session.execute(select(User.id).where(User.email.in_(emails)))).scalars().all()
        if existing:
            await session.execute(delete(Booking).where(Booking.renter_id.in_(existing)))
            await session.execute(delete(Property).where(Property.host_id.in_(existing)))
            await session.execute(delete(User).where(User.id.in_(existing)))
            await session.flush()
            print(f"🧹 Removed {len(existing)} existing demo users and their data")

        # ------------------------------------------------------------------
        # 1. Users
        # ------------------------------------------------------------------
        hosts: list[User] = []
        renters: list[User] = []
        for role, rows, bucket in (("host", HOSTS, hosts), ("renter", RENTERS, renters)):
            for row in rows:
                user = User(hashed_password=hash_password(DEMO_PASSWORD), role=role, **row)
                session.add(user)
                bucket.append(user)
        await session.flush()
        print(f"✅ Created {len(hosts)} hosts and {len(renters)} renters")

        # ------------------------------------------------------------------
        # 2. Properties
        # ------------------------------------------------------------------
        properties: list[Property] = []
        for host_index, data in PROPERTIES:
            prop = Property(host_id=hosts[host_index].id, **data)
            session.add(prop)
            await session.flush()
            properties.append(prop)
            print(f"   🏠 {prop.title}, {prop.city} ({prop.price_per_night}/night)")

        # ------------------------------------------------------------------
        # 3. Bookings, through the booking engine
        # ------------------------------------------------------------------
        now = utc_now()
        booking_count = 0
        for renter_index, prop_index, offset, nights, guests, final_status, requests in BOOKINGS:
            renter = renters[renter_index]
            check_in = _at_check_in(offset)
            booking = await booking_service.create_booking(
                session,
                renter,
                property_id=properties[prop_index].id,
                check_in=check_in,
                check_out=check_in + timedelta(days=nights),
                guests=guests,
                special_requests=requests,
                now=now,
            )
            if final_status is BookingStatus.CANCELED:
                await booking_service.cancel_booking(
                    session,
                    renter,
                    booking.id,
                    cancellation_reason="Change of travel plans",
                    now=now,
                )
            booking_count += 1

        await session.commit()

        print(f"✅ Created {booking_count} bookings")
        print()
        print("=" * 60)
        print("📊 Seed Summary")
        print("=" * 60)
        print(f"   Hosts:       {len(hosts)}")
        print(f"   Renters:     {len(renters)}")
        print(f"   Properties:  {len(properties)}")
        print(f"   Bookings:    {booking_count}")
        print(f"   Password:    {DEMO_PASSWORD} (all demo accounts)")
        print("=" * 60)
        print("🎉 Done! Log in at /api/v1/auth/login")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
