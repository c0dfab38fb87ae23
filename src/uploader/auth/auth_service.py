"""Bearer token issuance and capability checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

import jwt
from jwt import ExpiredSignatureError
from jwt import InvalidTokenError as PyJWTInvalidTokenError
import structlog


logger = structlog.get_logger(__name__)

UPLOAD_FILES = "upload_files"


def _utcnow() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(tz=timezone.utc)


class AuthError(Exception):
    """Base class for auth failures."""


class InvalidTokenError(AuthError):
    """Raised when token cannot be decoded."""


class TokenExpiredError(AuthError):
    """Raised when token is expired."""


class MissingCapabilityError(AuthError):
    """Raised when the token does not grant the required capability."""


@dataclass(slots=True)
class TokenClaims:
    subject: str
    capabilities: frozenset[str] = field(default_factory=frozenset)

    def can(self, capability: str) -> bool:
        return capability in self.capabilities


@dataclass(slots=True)
class AuthService:
    """Sign and verify HS256 tokens carrying a ``capabilities`` claim."""

    signing_key: str
    token_ttl: timedelta = timedelta(hours=24)

    def __post_init__(self) -> None:
        if not self.signing_key:
            raise RuntimeError("JWT_SIGNING_KEY is not configured")

    def issue_token(
        self,
        subject: str,
        capabilities: Iterable[str],
        *,
        issued_at: datetime | None = None,
    ) -> str:
        now = issued_at or _utcnow()
        payload: dict[str, Any] = {
            "sub": subject,
            "capabilities": sorted(set(capabilities)),
            "iat": int(now.timestamp()),
            "exp": int((now + self.token_ttl).timestamp()),
        }
        logger.info("auth.token.issued", subject=subject, capabilities=payload["capabilities"])
        return jwt.encode(payload, self.signing_key, algorithm="HS256")

    def validate_token(self, token: str, required_capability: str | None = None) -> TokenClaims:
        """Decode JWT and ensure it grants ``required_capability``."""
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.signing_key,
                algorithms=["HS256"],
                options={"require": ["exp", "iat", "sub"]},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("Token expired") from exc
        except PyJWTInvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc

        raw_capabilities = payload.get("capabilities") or []
        if not isinstance(raw_capabilities, list):
            raise InvalidTokenError("Invalid capabilities claim")
        claims = TokenClaims(
            subject=str(payload["sub"]),
            capabilities=frozenset(str(item) for item in raw_capabilities),
        )
        if required_capability and not claims.can(required_capability):
            logger.warning(
                "auth.capability.denied",
                subject=claims.subject,
                required=required_capability,
            )
            raise MissingCapabilityError(f"Missing capability '{required_capability}'")
        return claims


__all__ = [
    "AuthError",
    "AuthService",
    "InvalidTokenError",
    "MissingCapabilityError",
    "TokenClaims",
    "TokenExpiredError",
    "UPLOAD_FILES",
]
