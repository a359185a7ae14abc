from __future__ import annotations

from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from blog_backend.config import Config
from blog_backend.db import db_session, is_row_id
from blog_backend.errors import AuthenticationError, AuthorizationError, InternalError

from .crud import get_user_by_id, public_user
from .security import decode_access_token


_bearer = HTTPBearer(auto_error=False)


def get_config(request: Request) -> Config:
    """The Config injected by `create_app`."""
    cfg = getattr(request.app.state, "cfg", None)
    if cfg is None:
        raise InternalError("server_config_missing")
    return cfg


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    cfg: Config = Depends(get_config),
) -> Dict[str, Any]:
    """Authenticate a request.

    Supports both:
      - the httpOnly session cookie set by /login
      - Authorization: Bearer <jwt> (scripts / API clients)

    Returns the public user record (no password hash). Every failure is a 401.
    """

    token: str | None = None

    # Prefer Bearer token when explicitly provided.
    if credentials is not None and credentials.credentials:
        token = credentials.credentials

    if not token:
        token = request.cookies.get(cfg.AUTH_COOKIE_NAME)

    if not token:
        raise AuthenticationError("no_token")

    try:
        payload = decode_access_token(token=token, secret=str(cfg.AUTH_JWT_SECRET or ""))
        user_id = int(payload["sub"])
        if not is_row_id(user_id):
            raise ValueError("sub_out_of_range")
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
        # Bad signature, expired, malformed, or a subject that isn't a user id.
        raise AuthenticationError("invalid_or_expired_token")

    with db_session(cfg.DB_DSN) as conn:
        row = get_user_by_id(conn, user_id)
        if row is None:
            # e.g. user deleted after the token was issued
            raise AuthenticationError("user_not_found")
        return public_user(row)


def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if not user.get("is_admin"):
        raise AuthorizationError("admin_required")
    return user
