"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{success, message?, data?, error?}`` wrapper around a payload."""

    success: bool = True
    message: str | None = None
    data: T | None = None
    error: str | None = None


class ErrorResponse(BaseModel):
    """Envelope returned for every failed request."""

    success: bool = False
    message: str
    error: str | None = None
