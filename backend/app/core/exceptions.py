"""Booking engine exceptions.

Every business-rule violation is an ``AppError`` carrying the HTTP status it
maps to; ``app.main`` renders them into the response envelope.
"""

from fastapi import status


class AppError(Exception):
    """Base application exception."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, error: str | None = None) -> None:
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class Unauthenticated(AppError):
    """No (valid) credentials were presented."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class Forbidden(AppError):
    """Credentials are valid but insufficient for this action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to access this resource"


class NotFound(AppError):
    """Resource not found exception."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "Resource") -> None:
        super().__init__(f"{resource} not found")


class BusinessRuleError(AppError):
    """Base for rule violations reported as 400."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request violates a booking rule"


class InvalidDateRange(BusinessRuleError):
    default_message = "Invalid date range"


class CapacityExceeded(BusinessRuleError):
    def __init__(self, max_guests: int) -> None:
        self.max_guests = max_guests
        super().__init__(f"Maximum {max_guests} guests allowed")


class PropertyUnavailable(BusinessRuleError):
    default_message = "Property is not available for booking"


class DateConflict(BusinessRuleError):
    default_message = "Property is not available for the selected dates"


class InvalidTransition(BusinessRuleError):
    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot change status from {current} to {target}")


class AlreadyCanceled(BusinessRuleError):
    default_message = "Booking is already canceled"


class Immutable(BusinessRuleError):
    default_message = "Cannot cancel completed booking"


class CancellationWindowClosed(BusinessRuleError):
    default_message = "Cannot cancel booking within 24 hours of check-in"


class InternalError(AppError):
    """A store or infrastructure failure; ``error`` holds the diagnostic."""

    def __init__(self, error: str, message: str | None = None) -> None:
        super().__init__(message, error=error)
