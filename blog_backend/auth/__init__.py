"""Authentication / authorization helpers.

Auth is kept lightweight:

- Users table (email/password hash + is_admin flag)
- Short-lived JWT session tokens (1 hour by default), carrying only the user id

The API reads the token from either:

- the httpOnly `token` cookie set by `/login`
- `Authorization: Bearer <token>` (useful for scripts / API clients)

Tokens are stateless: logout clears the cookie but a copied token stays valid
until it expires.
"""

from .deps import get_config, get_current_user, require_admin
from .crud import bootstrap_admin_if_needed, create_user

__all__ = [
    "get_config",
    "get_current_user",
    "require_admin",
    "bootstrap_admin_if_needed",
    "create_user",
]
