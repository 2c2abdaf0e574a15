"""Domain errors raised by services and mapped to HTTP in api.exceptions."""


class NotFoundError(Exception):
    """Raised when a resource is missing or not owned by the caller.

    Both cases produce the same message so callers cannot probe for other
    users' rows.
    """

    def __init__(self, resource: str, identifier: str | int | None = None):
        self.resource = resource
        self.identifier = identifier
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} with id '{identifier}' not found"
        super().__init__(message)


class ValidationError(Exception):
    """Raised when request validation fails."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)


class DuplicateResourceError(Exception):
    """Raised on a uniqueness violation.

    ``status_code`` differs per resource: 409 for watchlist entries and
    holdings, 400 for portfolio names.
    """

    def __init__(self, message: str, status_code: int = 409):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class LimitExceededError(Exception):
    """Raised when a user already owns the maximum number of live portfolios."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Portfolio limit reached ({limit} portfolios)")


class PortfolioNotEmptyError(Exception):
    """Raised when deleting a portfolio that still has holdings."""

    def __init__(self, portfolio_id: int, holdings_count: int):
        self.portfolio_id = portfolio_id
        self.holdings_count = holdings_count
        super().__init__(
            f"Cannot delete non-empty portfolio ({holdings_count} holdings remain)"
        )


class DataSourceError(Exception):
    """Raised when an external data source fails."""

    def __init__(self, source: str, message: str | None = None):
        self.source = source
        detail = f"Data source '{source}' error"
        if message:
            detail = f"{detail}: {message}"
        super().__init__(detail)


class AuthenticationError(Exception):
    """Raised when the request carries no valid token."""

    def __init__(self, message: str = "Not authenticated"):
        self.message = message
        super().__init__(message)
