from __future__ import annotations

from typing import Any, Dict, List, Optional

from blog_backend.db import insert_returning_id, is_row_id
from blog_backend.util.time import utcnow_iso

from .ownership import ensure_modifiable, ensure_readable


def _debug(msg: str) -> None:
    print(f"[posts] {msg}")


def get_post(conn: Any, post_id: int) -> Optional[Any]:
    if not is_row_id(post_id):
        return None
    return conn.execute("SELECT * FROM posts WHERE post_id=?", (int(post_id),)).fetchone()


def create_post(conn: Any, *, user_id: int, title: str, content: str) -> Dict[str, Any]:
    """Insert a post owned by `user_id` (always the authenticated requester)."""
    post_id = insert_returning_id(
        conn,
        "INSERT INTO posts (user_id, title, content, created_at) VALUES (?,?,?,?)",
        (int(user_id), title, content, utcnow_iso()),
        id_col="post_id",
    )
    row = get_post(conn, post_id)
    assert row is not None
    return dict(row)


def list_posts(conn: Any, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    """The requester's posts; admins see every post."""
    if user.get("is_admin"):
        rows = conn.execute("SELECT * FROM posts ORDER BY post_id").fetchall()
    else:
        rows = conn.execute(
            "SELECT * FROM posts WHERE user_id=? ORDER BY post_id",
            (int(user["user_id"]),),
        ).fetchall()
    return [dict(r) for r in rows]


def read_post(conn: Any, post_id: int, user: Dict[str, Any]) -> Dict[str, Any]:
    return dict(ensure_readable(get_post(conn, post_id), user, not_found="post_not_found"))


def delete_post(conn: Any, post_id: int, user: Dict[str, Any]) -> None:
    """Hard delete; comments on the post go with it (ON DELETE CASCADE)."""
    ensure_modifiable(get_post(conn, post_id), user, not_found="post_not_found")
    conn.execute("DELETE FROM posts WHERE post_id=?", (int(post_id),))
    _debug(f"Deleted post post_id={post_id} by user_id={user['user_id']}")
