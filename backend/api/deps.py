"""Common dependencies for API routes."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings, get_settings
from database import get_session
from services.auth import AuthUser, AuthVerifier
from services.cache import CacheBackend
from services.market_data import MarketDataService

TOKEN_COOKIE = "token"


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async for session in get_session():
        yield session


def get_cache(request: Request) -> CacheBackend:
    """Shared read cache created in the application lifespan."""
    return request.app.state.cache


def get_market_data(request: Request) -> MarketDataService:
    return request.app.state.market_data


def get_auth_verifier(request: Request) -> AuthVerifier:
    return request.app.state.auth_verifier


def _extract_token(request: Request) -> str | None:
    # Cookie wins over the Authorization header, as set by the login flow
    token = request.cookies.get(TOKEN_COOKIE)
    if token:
        return token
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def get_current_user(
    request: Request,
    verifier: Annotated[AuthVerifier, Depends(get_auth_verifier)],
) -> AuthUser:
    """Resolve the caller from the request token or raise AuthenticationError."""
    return verifier.verify(_extract_token(request))


# Type aliases for dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Cache = Annotated[CacheBackend, Depends(get_cache)]
MarketData = Annotated[MarketDataService, Depends(get_market_data)]
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
