"""Tests for session tokens and request authentication."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from starlette.requests import Request

from app.core.config import get_settings
from app.core.errors import Unauthenticated
from app.core.identity import JWT_ALGORITHM, authenticate, get_current_user_id, issue_token


def make_request(headers: dict[str, str] | None = None, cookie: str | None = None) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    if cookie is not None:
        raw.append((b"cookie", f"session={cookie}".encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


def test_bearer_token_round_trip():
    request = make_request({"Authorization": f"Bearer {issue_token(42)}"})

    assert authenticate(request) == "42"


def test_cookie_token_round_trip():
    assert authenticate(make_request(cookie=issue_token("7"))) == "7"


def test_missing_token():
    with pytest.raises(Unauthenticated):
        authenticate(make_request())
    assert get_current_user_id(make_request()) is None


def test_expired_token():
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    token = jwt.encode(
        {"sub": "1", "exp": past},
        get_settings().auth_secret,
        algorithm=JWT_ALGORITHM,
    )

    with pytest.raises(Unauthenticated, match="expired"):
        authenticate(make_request(cookie=token))


def test_token_signed_with_other_secret():
    token = jwt.encode({"sub": "1"}, "not-the-secret", algorithm=JWT_ALGORITHM)

    with pytest.raises(Unauthenticated):
        authenticate(make_request(cookie=token))


def test_token_without_subject():
    token = jwt.encode({"foo": "bar"}, get_settings().auth_secret, algorithm=JWT_ALGORITHM)

    with pytest.raises(Unauthenticated):
        authenticate(make_request(cookie=token))
