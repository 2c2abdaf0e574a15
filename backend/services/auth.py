"""Token verification for the authenticated user.

Registration and login live in a separate service; this module only turns an
already-issued token into an ``AuthUser``.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

import jwt

from errors import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    """Identity carried in a verified token."""

    id: int
    email: str
    name: str


class AuthVerifier(Protocol):
    def verify(self, token: str | None) -> AuthUser: ...


class JWTAuthVerifier:
    """Verify HS256-signed tokens whose payload is ``{id, email, name, exp}``."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def verify(self, token: str | None) -> AuthUser:
        """Decode ``token`` and return its user.

        Raises:
            AuthenticationError: If the token is missing, malformed, expired,
                signed with another key, or lacks the identity claims.
        """
        if not token:
            raise AuthenticationError("No token provided")

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.InvalidTokenError as exc:
            logger.debug("Rejected token: %s", exc)
            raise AuthenticationError("Invalid or expired token") from exc

        try:
            return AuthUser(
                id=int(payload["id"]),
                email=str(payload.get("email", "")),
                name=str(payload.get("name", "")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthenticationError("Invalid or expired token") from exc
