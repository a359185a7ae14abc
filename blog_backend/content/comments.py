from __future__ import annotations

from typing import Any, Dict, List, Optional

from blog_backend.db import insert_returning_id, is_row_id
from blog_backend.errors import NotFoundError
from blog_backend.util.time import utcnow_iso

from .ownership import ensure_modifiable, ensure_readable, is_owner
from .posts import get_post


def _debug(msg: str) -> None:
    print(f"[comments] {msg}")


def get_comment(conn: Any, comment_id: int) -> Optional[Any]:
    if not is_row_id(comment_id):
        return None
    return conn.execute("SELECT * FROM comments WHERE comment_id=?", (int(comment_id),)).fetchone()


def create_comment(
    conn: Any,
    *,
    user_id: int,
    post_id: int,
    title: str,
    content: str,
) -> Dict[str, Any]:
    """Insert a comment on an existing post. Raises NotFoundError if the post is gone."""
    if get_post(conn, post_id) is None:
        raise NotFoundError("post_not_found")

    comment_id = insert_returning_id(
        conn,
        """
        INSERT INTO comments (post_id, user_id, title, content, created_at)
        VALUES (?,?,?,?,?)
        """,
        (int(post_id), int(user_id), title, content, utcnow_iso()),
        id_col="comment_id",
    )
    row = get_comment(conn, comment_id)
    assert row is not None
    return dict(row)


def list_comments(conn: Any, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    """The requester's comments; admins see every comment."""
    if user.get("is_admin"):
        rows = conn.execute("SELECT * FROM comments ORDER BY comment_id").fetchall()
    else:
        rows = conn.execute(
            "SELECT * FROM comments WHERE user_id=? ORDER BY comment_id",
            (int(user["user_id"]),),
        ).fetchall()
    return [dict(r) for r in rows]


def list_post_comments(conn: Any, post_id: int, user: Dict[str, Any]) -> List[Dict[str, Any]]:
    """All comments on a post the requester owns (or any post, for admins)."""
    post = get_post(conn, post_id)
    if post is None or not (is_owner(post, user) or user.get("is_admin")):
        raise NotFoundError("post_not_found")
    rows = conn.execute(
        "SELECT * FROM comments WHERE post_id=? ORDER BY comment_id",
        (int(post_id),),
    ).fetchall()
    return [dict(r) for r in rows]


def read_comment(conn: Any, comment_id: int, user: Dict[str, Any]) -> Dict[str, Any]:
    return dict(ensure_readable(get_comment(conn, comment_id), user, not_found="comment_not_found"))


def delete_comment(conn: Any, comment_id: int, user: Dict[str, Any]) -> None:
    ensure_modifiable(get_comment(conn, comment_id), user, not_found="comment_not_found")
    conn.execute("DELETE FROM comments WHERE comment_id=?", (int(comment_id),))
    _debug(f"Deleted comment comment_id={comment_id} by user_id={user['user_id']}")
