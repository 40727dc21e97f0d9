# app/core/identity.py
"""Who is calling.

Login hands out a signed JWT in the ``session`` cookie; API clients may send
the same token as ``Authorization: Bearer <jwt>``. Everything downstream only
ever sees the owner id string.
"""
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Request

from app.core.config import get_settings
from app.core.errors import Unauthenticated

JWT_ALGORITHM = "HS256"
SESSION_COOKIE = "session"


def issue_token(user_id: int | str) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(hours=settings.auth_token_ttl_hours),
    }
    return jwt.encode(payload, settings.auth_secret, algorithm=JWT_ALGORITHM)


def _token_from_request(request: Request) -> str | None:
    authorization = request.headers.get("authorization", "")
    if authorization.startswith("Bearer "):
        return authorization[7:]
    return request.cookies.get(SESSION_COOKIE)


def authenticate(request: Request) -> str:
    """Return the caller's owner id or raise Unauthenticated."""
    token = _token_from_request(request)
    if not token:
        raise Unauthenticated()
    try:
        payload = jwt.decode(token, get_settings().auth_secret, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise Unauthenticated("Session expired") from exc
    except jwt.InvalidTokenError as exc:
        raise Unauthenticated("Invalid session") from exc

    owner_id = payload.get("sub")
    if not owner_id:
        raise Unauthenticated("Invalid session")
    return owner_id


# --- helper for HTML pages: None instead of an exception ---
def get_current_user_id(request: Request) -> str | None:
    try:
        return authenticate(request)
    except Unauthenticated:
        return None
