"""Tests for the bookings endpoints: status codes, envelope and check precedence.

The clock is pinned to 2026-01-01 12:00 UTC by the ``client`` fixture.
"""

import uuid
from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from app.api.deps import get_db, get_optional_user
from app.domain.booking_state import BookingStatus
from app.main import app

BOOKINGS = "/api/v1/bookings"


def _iso(day: int) -> str:
    return f"2026-01-{day:02d}T00:00:00Z"


def _payload(property_id, check_in: int = 10, check_out: int = 12, guests: int = 2) -> dict:
    return {
        "property_id": str(property_id),
        "check_in_date": _iso(check_in),
        "check_out_date": _iso(check_out),
        "number_of_guests": guests,
    }


# ---------------------------------------------------------------------------
# POST /api/v1/bookings
# ---------------------------------------------------------------------------


class TestCreateBooking:
    async def test_create_success(self, client: AsyncClient, renter, renter_headers, listing) -> None:
        body = _payload(listing.id) | {"special_requests": "Late check-in around 10pm"}
        response = await client.post(BOOKINGS, json=body, headers=renter_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Booking created successfully"
        booking = data["data"]["booking"]
        assert booking["status"] == "confirmed"
        assert float(booking["total_price"]) == 200.0
        assert booking["number_of_nights"] == 2
        assert booking["renter_id"] == str(renter.id)
        assert booking["host_id"] == str(listing.host_id)
        assert booking["check_in_date"].startswith("2026-01-10")
        assert booking["special_requests"] == "Late check-in around 10pm"
        assert booking["property"]["title"] == "Test Cottage"
        assert booking["host"]["name"] == "Test Host"
        assert booking["renter"]["name"] == "Test Renter"

    async def test_overlap_is_rejected(
        self, client: AsyncClient, renter_headers, other_renter_headers, listing
    ) -> None:
        first = await client.post(BOOKINGS, json=_payload(listing.id, 10, 13), headers=renter_headers)
        assert first.status_code == 201

        clash = await client.post(BOOKINGS, json=_payload(listing.id, 12, 15), headers=other_renter_headers)
        assert clash.status_code == 400
        assert clash.json() == {
            "success": False,
            "message": "Property is not available for the selected dates",
        }

        adjacent = await client.post(BOOKINGS, json=_payload(listing.id, 13, 15), headers=other_renter_headers)
        assert adjacent.status_code == 201

    async def test_without_token_is_forbidden(self, client: AsyncClient, listing) -> None:
        response = await client.post(BOOKINGS, json=_payload(listing.id))
        assert response.status_code == 403
        assert response.json()["success"] is False

    async def test_host_is_forbidden(self, client: AsyncClient, host_headers, listing) -> None:
        response = await client.post(BOOKINGS, json=_payload(listing.id), headers=host_headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Only renters can create bookings"

    @pytest.mark.parametrize("check_in,check_out", [(10, 10), (12, 10)])
    async def test_bad_date_order(self, client: AsyncClient, renter_headers, listing, check_in, check_out) -> None:
        response = await client.post(BOOKINGS, json=_payload(listing.id, check_in, check_out), headers=renter_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Check-out date must be after check-in date"

    async def test_past_check_in(self, client: AsyncClient, renter_headers, listing) -> None:
        body = _payload(listing.id) | {"check_in_date": "2025-12-31T00:00:00Z"}
        response = await client.post(BOOKINGS, json=body, headers=renter_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Check-in date cannot be in the past"

    async def test_unknown_property(self, client: AsyncClient, renter_headers) -> None:
        response = await client.post(BOOKINGS, json=_payload(uuid.uuid4()), headers=renter_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Property not found"

    async def test_too_many_guests(self, client: AsyncClient, renter_headers, listing) -> None:
        response = await client.post(BOOKINGS, json=_payload(listing.id, guests=5), headers=renter_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Maximum 4 guests allowed"

    async def test_schema_errors_are_400(self, client: AsyncClient, renter_headers, listing) -> None:
        body = _payload(listing.id)
        del body["number_of_guests"]
        response = await client.post(BOOKINGS, json=body, headers=renter_headers)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "ValidationError"
        assert "number_of_guests" in data["message"]

    async def test_zero_guests_is_a_validation_error(self, client: AsyncClient, renter_headers, listing) -> None:
        response = await client.post(BOOKINGS, json=_payload(listing.id, guests=0), headers=renter_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"


# ---------------------------------------------------------------------------
# GET /api/v1/bookings
# ---------------------------------------------------------------------------


class TestListBookings:
    async def test_renter_list_with_pagination(self, client: AsyncClient, renter_headers, make_booking, jan) -> None:
        for day in (5, 10, 15):
            await make_booking(jan(day), jan(day + 2))

        response = await client.get(BOOKINGS, params={"page": 1, "limit": 2}, headers=renter_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["bookings"]) == 2
        assert data["pagination"] == {
            "current_page": 1,
            "total_pages": 2,
            "total": 3,
            "has_next": True,
            "has_prev": False,
        }

        response = await client.get(BOOKINGS, params={"page": 2, "limit": 2}, headers=renter_headers)
        pagination = response.json()["data"]["pagination"]
        assert (pagination["has_next"], pagination["has_prev"]) == (False, True)

    async def test_empty_list(self, client: AsyncClient, other_renter_headers, make_booking) -> None:
        await make_booking()
        response = await client.get(BOOKINGS, headers=other_renter_headers)
        data = response.json()["data"]
        assert data["bookings"] == []
        assert data["pagination"]["total"] == 0
        assert data["pagination"]["total_pages"] == 0

    async def test_status_filter(self, client: AsyncClient, host_headers, make_booking, jan) -> None:
        await make_booking()
        await make_booking(jan(20), jan(22), status=BookingStatus.CANCELED)

        response = await client.get(BOOKINGS, params={"status": "canceled"}, headers=host_headers)
        bookings = response.json()["data"]["bookings"]
        assert [b["status"] for b in bookings] == ["canceled"]

    async def test_limit_above_maximum(self, client: AsyncClient, renter_headers) -> None:
        response = await client.get(BOOKINGS, params={"limit": 1000}, headers=renter_headers)
        assert response.status_code == 400

    async def test_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.get(BOOKINGS)
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Not authenticated"}


# ---------------------------------------------------------------------------
# GET /api/v1/bookings/{id}
# ---------------------------------------------------------------------------


class TestGetBooking:
    async def test_renter_and_host_can_read(
        self, client: AsyncClient, renter_headers, host_headers, make_booking
    ) -> None:
        booking = await make_booking()
        for headers in (renter_headers, host_headers):
            response = await client.get(f"{BOOKINGS}/{booking.id}", headers=headers)
            assert response.status_code == 200
            assert response.json()["data"]["booking"]["id"] == str(booking.id)

    async def test_stranger_gets_403(self, client: AsyncClient, other_renter_headers, make_booking) -> None:
        booking = await make_booking()
        response = await client.get(f"{BOOKINGS}/{booking.id}", headers=other_renter_headers)
        assert response.status_code == 403

    async def test_missing_gets_404(self, client: AsyncClient, other_renter_headers) -> None:
        response = await client.get(f"{BOOKINGS}/{uuid.uuid4()}", headers=other_renter_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Booking not found"

    async def test_authentication_checked_before_existence(self, client: AsyncClient) -> None:
        response = await client.get(f"{BOOKINGS}/{uuid.uuid4()}")
        assert response.status_code == 401

    async def test_malformed_id(self, client: AsyncClient, renter_headers) -> None:
        response = await client.get(f"{BOOKINGS}/not-a-uuid", headers=renter_headers)
        assert response.status_code == 400


# ---------------------------------------------------------------------------
# PUT /api/v1/bookings/{id}/status
# ---------------------------------------------------------------------------


class TestUpdateBookingStatus:
    async def test_complete(self, client: AsyncClient, host_headers, make_booking) -> None:
        booking = await make_booking()
        response = await client.put(
            f"{BOOKINGS}/{booking.id}/status", json={"status": "completed"}, headers=host_headers
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Booking completed successfully"
        assert response.json()["data"]["booking"]["status"] == "completed"

    async def test_illegal_transition(self, client: AsyncClient, host_headers, make_booking) -> None:
        booking = await make_booking(status=BookingStatus.CANCELED)
        response = await client.put(
            f"{BOOKINGS}/{booking.id}/status", json={"status": "confirmed"}, headers=host_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot change status from canceled to confirmed"

    @pytest.mark.parametrize("unknown", ["archived", "x" * 21, ""])
    async def test_unknown_status(self, client: AsyncClient, host_headers, make_booking, unknown) -> None:
        booking = await make_booking()
        response = await client.put(
            f"{BOOKINGS}/{booking.id}/status", json={"status": unknown}, headers=host_headers
        )
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": f"Cannot change status from confirmed to {unknown}",
        }

    async def test_renter_cannot_confirm_pending(self, client: AsyncClient, renter_headers, make_booking) -> None:
        booking = await make_booking(status=BookingStatus.PENDING)
        response = await client.put(
            f"{BOOKINGS}/{booking.id}/status", json={"status": "confirmed"}, headers=renter_headers
        )
        assert response.status_code == 403

    async def test_stranger(self, client: AsyncClient, other_host_headers, make_booking) -> None:
        booking = await make_booking()
        response = await client.put(
            f"{BOOKINGS}/{booking.id}/status", json={"status": "canceled"}, headers=other_host_headers
        )
        assert response.status_code == 403

    async def test_unauthenticated(self, client: AsyncClient, make_booking) -> None:
        booking = await make_booking()
        response = await client.put(f"{BOOKINGS}/{booking.id}/status", json={"status": "canceled"})
        assert response.status_code == 401


# ---------------------------------------------------------------------------
# PUT /api/v1/bookings/{id}/cancel
# ---------------------------------------------------------------------------


class TestCancelBooking:
    async def test_cancel_with_reason(self, client: AsyncClient, renter, renter_headers, make_booking) -> None:
        booking = await make_booking()
        response = await client.put(
            f"{BOOKINGS}/{booking.id}/cancel",
            json={"cancellation_reason": "Flight canceled"},
            headers=renter_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Booking canceled successfully"
        assert data["data"]["booking"]["status"] == "canceled"
        assert data["data"]["booking"]["cancellation_reason"] == "Flight canceled"
        assert data["data"]["booking"]["canceled_by"] == str(renter.id)

    async def test_cancel_without_body(self, client: AsyncClient, host_headers, make_booking) -> None:
        booking = await make_booking()
        response = await client.put(f"{BOOKINGS}/{booking.id}/cancel", headers=host_headers)
        assert response.status_code == 200

    async def test_inside_cutoff(self, client: AsyncClient, renter_headers, make_booking, now) -> None:
        booking = await make_booking(now + timedelta(hours=24), now + timedelta(days=3))
        response = await client.put(f"{BOOKINGS}/{booking.id}/cancel", headers=renter_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot cancel booking within 24 hours of check-in"

    async def test_twice(self, client: AsyncClient, renter_headers, make_booking) -> None:
        booking = await make_booking()
        await client.put(f"{BOOKINGS}/{booking.id}/cancel", headers=renter_headers)
        response = await client.put(f"{BOOKINGS}/{booking.id}/cancel", headers=renter_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Booking is already canceled"

    async def test_completed(self, client: AsyncClient, renter_headers, make_booking) -> None:
        booking = await make_booking(status=BookingStatus.COMPLETED)
        response = await client.put(f"{BOOKINGS}/{booking.id}/cancel", headers=renter_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot cancel completed booking"


# ---------------------------------------------------------------------------
# Store failures
# ---------------------------------------------------------------------------


class TestStoreFailure:
    async def test_store_error_is_500_with_diagnostic(self, client: AsyncClient) -> None:
        broken = MagicMock()
        broken.execute = AsyncMock(side_effect=OperationalError("SELECT 1", {}, Exception("db down")))

        async def broken_db():
            yield broken

        app.dependency_overrides[get_db] = broken_db
        app.dependency_overrides[get_optional_user] = lambda: SimpleNamespace(id=uuid.uuid4())

        response = await client.get(f"{BOOKINGS}/{uuid.uuid4()}")
        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "An unexpected error occurred"
        assert "db down" in data["error"]
