"""Ownership rules shared by posts and comments.

- Reads: owner only. A record someone else owns is reported as missing (404)
  so its existence doesn't leak. Admins get no read override.
- Mutations (delete): owner or admin, otherwise 403.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from blog_backend.errors import AuthorizationError, NotFoundError


def is_owner(record: Any, user: Dict[str, Any]) -> bool:
    return int(record["user_id"]) == int(user["user_id"])


def can_modify(record: Any, user: Dict[str, Any]) -> bool:
    return is_owner(record, user) or bool(user.get("is_admin"))


def ensure_readable(record: Optional[Any], user: Dict[str, Any], *, not_found: str) -> Any:
    if record is None or not is_owner(record, user):
        raise NotFoundError(not_found)
    return record


def ensure_modifiable(record: Optional[Any], user: Dict[str, Any], *, not_found: str) -> Any:
    if record is None:
        raise NotFoundError(not_found)
    if not can_modify(record, user):
        raise AuthorizationError("not_owner")
    return record
