"""Common authentication dependencies for FastAPI routers."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..api.errors import forbidden_error, unauthorized_error
from .auth_service import (
    AuthService,
    InvalidTokenError,
    MissingCapabilityError,
    TokenClaims,
    TokenExpiredError,
)

security = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    try:
        return request.app.state.auth_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("AuthService is not configured") from exc


def require_capability(capability: str) -> Callable[..., TokenClaims]:
    """Build a dependency rejecting callers whose token lacks ``capability``."""

    def dependency(
        credentials: HTTPAuthorizationCredentials | None = Depends(security),
        service: AuthService = Depends(get_auth_service),
    ) -> TokenClaims:
        if credentials is None:
            raise unauthorized_error("missing_token", "Authentication required.")
        try:
            return service.validate_token(credentials.credentials, required_capability=capability)
        except TokenExpiredError as exc:
            raise unauthorized_error("token_expired", "Token expired.") from exc
        except InvalidTokenError as exc:
            raise unauthorized_error("invalid_token", "Invalid token.") from exc
        except MissingCapabilityError as exc:
            raise forbidden_error("Sorry, you are not allowed to upload files.") from exc

    return dependency


__all__ = ["get_auth_service", "require_capability"]
