from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.uploader.auth.auth_service import (
    UPLOAD_FILES,
    AuthService,
    InvalidTokenError,
    MissingCapabilityError,
    TokenExpiredError,
)


@pytest.fixture
def service() -> AuthService:
    return AuthService(signing_key="unit-secret", token_ttl=timedelta(hours=1))


@pytest.mark.unit
def test_issued_token_round_trips(service):
    token = service.issue_token("editor", [UPLOAD_FILES, UPLOAD_FILES])

    claims = service.validate_token(token, required_capability=UPLOAD_FILES)

    assert claims.subject == "editor"
    assert claims.capabilities == frozenset({UPLOAD_FILES})
    assert claims.can(UPLOAD_FILES)


@pytest.mark.unit
def test_token_payload_shape(service):
    issued_at = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)

    token = service.issue_token("editor", [UPLOAD_FILES], issued_at=issued_at)

    payload = jwt.decode(token, options={"verify_signature": False})
    assert payload["sub"] == "editor"
    assert payload["capabilities"] == [UPLOAD_FILES]
    assert payload["exp"] - payload["iat"] == 3600


@pytest.mark.unit
def test_missing_capability_is_rejected(service):
    token = service.issue_token("reader", ["read"])

    with pytest.raises(MissingCapabilityError):
        service.validate_token(token, required_capability=UPLOAD_FILES)


@pytest.mark.unit
def test_no_required_capability_accepts_any_valid_token(service):
    token = service.issue_token("reader", [])

    assert service.validate_token(token).subject == "reader"


@pytest.mark.unit
def test_expired_token_is_rejected(service):
    token = service.issue_token(
        "editor", [UPLOAD_FILES], issued_at=datetime.now(timezone.utc) - timedelta(hours=2)
    )

    with pytest.raises(TokenExpiredError):
        service.validate_token(token)


@pytest.mark.unit
def test_foreign_signature_is_rejected(service):
    other = AuthService(signing_key="someone-else")
    token = other.issue_token("editor", [UPLOAD_FILES])

    with pytest.raises(InvalidTokenError):
        service.validate_token(token)


@pytest.mark.unit
def test_garbage_token_is_rejected(service):
    with pytest.raises(InvalidTokenError):
        service.validate_token("not-a-jwt")


@pytest.mark.unit
def test_capabilities_claim_must_be_a_list(service):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "sub": "editor",
            "capabilities": "upload_files",
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=5)).timestamp()),
        },
        "unit-secret",
        algorithm="HS256",
    )

    with pytest.raises(InvalidTokenError):
        service.validate_token(token)


@pytest.mark.unit
def test_empty_signing_key_is_refused():
    with pytest.raises(RuntimeError):
        AuthService(signing_key="")
