from __future__ import annotations

from typing import Any, Dict, Optional

from blog_backend.auth.crud import create_user, users_empty
from blog_backend.config import Config
from blog_backend.content.posts import create_post
from blog_backend.db import connect


def _debug(msg: str) -> None:
    print(f"[seed] {msg}")


DEMO_EMAIL = "billy@mail.com"


def seed_demo_data(cfg: Config) -> Optional[Dict[str, Any]]:
    """Insert a demo user with one post. No-op unless the users table is empty."""
    with connect(cfg.DB_DSN) as conn:
        if not users_empty(conn):
            return None
        user = create_user(conn, username="Billy", email=DEMO_EMAIL, password="billy123")
        create_post(
            conn,
            user_id=int(user["user_id"]),
            title="Faire les courses",
            content="ananas, savon, éponge",
        )
    _debug(f"Seeded demo user {DEMO_EMAIL} (user_id={user['user_id']})")
    return user
