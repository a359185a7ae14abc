"""Error taxonomy for the API.

HTTP-facing errors subclass FastAPI's `HTTPException` so routes and
dependencies can simply raise them. `detail` is always a short snake_case
code so frontends can branch on it.
"""

from __future__ import annotations

from typing import Dict, Optional

from fastapi import HTTPException


class ConfigError(RuntimeError):
    """Invalid or missing configuration detected at construction time."""


class AppError(HTTPException):
    status_code = 500
    default_detail = "error"

    def __init__(self, detail: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class ValidationError(AppError):
    status_code = 400
    default_detail = "validation_error"


class AuthenticationError(AppError):
    status_code = 401
    default_detail = "unauthenticated"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(AppError):
    status_code = 403
    default_detail = "forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_detail = "not_found"


class ConflictError(AppError):
    status_code = 409
    default_detail = "conflict"


class InternalError(AppError):
    # Never carries the underlying exception text.
    status_code = 500
    default_detail = "internal_error"
