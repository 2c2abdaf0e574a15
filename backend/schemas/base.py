"""Shared response envelope."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{"success": true, "data": ...}`` wrapper for every successful response.

    Failures are rendered by the exception handlers as
    ``{"success": false, "error": "..."}``.
    """

    success: bool = True
    data: T | None = None
    message: str | None = None


def ok(data=None, message: str | None = None) -> dict:
    """Build a success envelope."""
    body: dict = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body
