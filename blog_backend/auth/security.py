from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from blog_backend.util.time import utcnow


_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
_JWT_ALG = "HS256"


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password_blank")
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except (ValueError, TypeError):
        # Malformed / unknown hash format
        return False


def create_access_token(
    *,
    secret: str,
    user_id: int,
    expires_minutes: int,
    now: Optional[datetime] = None,
) -> str:
    """Sign a session token. The user id (`sub`) is the only identity claim."""
    if not secret:
        raise ValueError("jwt_secret_blank")

    issued = now or utcnow()
    exp = issued + timedelta(minutes=max(1, int(expires_minutes)))

    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "iat": int(issued.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def decode_access_token(*, token: str, secret: str) -> Dict[str, Any]:
    """Verify signature + expiry. Raises jwt.InvalidTokenError (or a subclass)."""
    if not token:
        raise jwt.InvalidTokenError("token_blank")
    if not secret:
        raise ValueError("jwt_secret_blank")
    return jwt.decode(token, secret, algorithms=[_JWT_ALG], options={"require": ["exp", "sub"]})


def dummy_verify() -> None:
    """Run one verification against a throwaway hash (for unknown accounts)."""
    _pwd.dummy_verify()
