"""Exception handlers for the API.

Services raise the errors defined in ``errors``; the handlers registered in
``main`` turn them into the ``{"success": false, "error": ...}`` envelope.
Messages are written for the end user and never carry SQL or stack details.
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from errors import (
    AuthenticationError,
    DataSourceError,
    DuplicateResourceError,
    LimitExceededError,
    NotFoundError,
    PortfolioNotEmptyError,
    ValidationError,
)

__all__ = [
    "AuthenticationError",
    "DataSourceError",
    "DuplicateResourceError",
    "EXCEPTION_HANDLERS",
    "LimitExceededError",
    "NotFoundError",
    "PortfolioNotEmptyError",
    "ValidationError",
]


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle NotFoundError exceptions."""
    return _error(404, str(exc))


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle ValidationError exceptions."""
    if exc.field:
        return _error(400, exc.message, field=exc.field)
    return _error(400, exc.message)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Collapse pydantic request errors into a single-line 400."""
    errors = exc.errors()
    if not errors:
        return _error(400, "Invalid request")
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    if location:
        return _error(400, f"{location}: {message}", field=location)
    return _error(400, message)


async def duplicate_resource_handler(
    request: Request, exc: DuplicateResourceError
) -> JSONResponse:
    """Handle DuplicateResourceError exceptions."""
    return _error(exc.status_code, exc.message)


async def limit_exceeded_handler(request: Request, exc: LimitExceededError) -> JSONResponse:
    """Handle LimitExceededError exceptions."""
    return _error(400, str(exc))


async def portfolio_not_empty_handler(
    request: Request, exc: PortfolioNotEmptyError
) -> JSONResponse:
    """Handle PortfolioNotEmptyError exceptions."""
    return _error(400, str(exc))


async def data_source_error_handler(request: Request, exc: DataSourceError) -> JSONResponse:
    """Handle DataSourceError exceptions."""
    return _error(502, str(exc), source=exc.source)


async def authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    """Handle AuthenticationError exceptions."""
    return JSONResponse(
        status_code=401,
        content={"success": False, "error": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


EXCEPTION_HANDLERS = {
    NotFoundError: not_found_handler,
    ValidationError: validation_error_handler,
    RequestValidationError: request_validation_handler,
    DuplicateResourceError: duplicate_resource_handler,
    LimitExceededError: limit_exceeded_handler,
    PortfolioNotEmptyError: portfolio_not_empty_handler,
    DataSourceError: data_source_error_handler,
    AuthenticationError: authentication_error_handler,
}
