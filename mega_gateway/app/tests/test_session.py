"""
Session Verification Tests

Covers session JWT issuance, verification outcomes and token extraction
from cookies and the Authorization header.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import jwt
import pytest

from mega_gateway.app.auth.session import (
    SessionError,
    create_session_jwt,
    extract_session_token,
    extract_token_from_header,
    verify_session,
)
from mega_gateway.app.models import Authenticated, Unauthenticated


def encode(settings, payload):
    return jwt.encode(payload, settings.SESSION_JWT_SECRET, algorithm="HS256")


def test_valid_token_is_authenticated(settings):
    token = create_session_jwt(
        {"sub": "user-123", "email": "dev@example.com", "name": "Test User"},
        settings=settings,
    )

    session = verify_session(token, settings)

    assert isinstance(session, Authenticated)
    assert session.user.user_id == "user-123"
    assert session.user.email == "dev@example.com"
    assert session.user.name == "Test User"
    assert "exp" in session.user.claims


def test_missing_token_is_unauthenticated(settings):
    assert isinstance(verify_session(None, settings), Unauthenticated)
    assert isinstance(verify_session("", settings), Unauthenticated)


def test_expired_token_is_unauthenticated(settings):
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = encode(settings, {"sub": "user-123", "iat": past, "exp": past + timedelta(minutes=5)})

    session = verify_session(token, settings)

    assert isinstance(session, Unauthenticated)
    assert session.reason == "session expired"


def test_wrong_secret_is_unauthenticated(settings):
    token = jwt.encode(
        {"sub": "user-123", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "another-secret-that-is-long-enough-1234",
        algorithm="HS256",
    )

    assert isinstance(verify_session(token, settings), Unauthenticated)


def test_token_without_sub_is_unauthenticated(settings):
    token = encode(settings, {"email": "dev@example.com", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)})

    assert isinstance(verify_session(token, settings), Unauthenticated)


def test_token_without_exp_is_unauthenticated(settings):
    token = encode(settings, {"sub": "user-123"})

    assert isinstance(verify_session(token, settings), Unauthenticated)


def test_garbage_token_is_unauthenticated(settings):
    session = verify_session("definitely.not.ajwt", settings)

    assert isinstance(session, Unauthenticated)
    assert session.reason.startswith("invalid token")


def test_issuer_is_checked_when_configured(settings):
    with_issuer = settings.model_copy(update={"SESSION_JWT_ISSUER": "mega-ui"})
    other_issuer = settings.model_copy(update={"SESSION_JWT_ISSUER": "someone-else"})

    token = create_session_jwt({"sub": "user-123"}, settings=with_issuer)

    assert isinstance(verify_session(token, with_issuer), Authenticated)
    assert isinstance(verify_session(token, other_issuer), Unauthenticated)


def test_issuer_required_when_configured(settings):
    with_issuer = settings.model_copy(update={"SESSION_JWT_ISSUER": "mega-ui"})
    token = create_session_jwt({"sub": "user-123"}, settings=settings)

    assert isinstance(verify_session(token, with_issuer), Unauthenticated)


def test_create_requires_sub(settings):
    with pytest.raises(SessionError):
        create_session_jwt({"email": "dev@example.com"}, settings=settings)


def test_create_does_not_mutate_claims(settings):
    claims = {"sub": "user-123"}

    create_session_jwt(claims, settings=settings)

    assert claims == {"sub": "user-123"}


def test_create_custom_expiry(settings):
    token = create_session_jwt({"sub": "user-123"}, expires_in_minutes=5, settings=settings)
    decoded = jwt.decode(token, settings.SESSION_JWT_SECRET, algorithms=["HS256"])

    assert decoded["exp"] - decoded["iat"] == 5 * 60


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, None),
        ("", None),
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("Basic abc", None),
        ("Bearer", None),
        ("Bearer a b", None),
    ],
)
def test_extract_token_from_header(header, expected):
    assert extract_token_from_header(header) == expected


def test_cookie_takes_precedence_over_header(settings):
    request = Mock()
    request.cookies = {"session": "from-cookie"}
    request.headers = {"Authorization": "Bearer from-header"}

    assert extract_session_token(request, settings) == "from-cookie"


def test_header_used_without_cookie(settings):
    request = Mock()
    request.cookies = {}
    request.headers = {"Authorization": "Bearer from-header"}

    assert extract_session_token(request, settings) == "from-header"


def test_custom_cookie_name(settings):
    custom = settings.model_copy(update={"SESSION_COOKIE_NAME": "mega_session"})
    request = Mock()
    request.cookies = {"session": "wrong", "mega_session": "right"}
    request.headers = {}

    assert extract_session_token(request, custom) == "right"
