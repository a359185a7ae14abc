from __future__ import annotations

from typing import Any, Dict, List, Optional

from blog_backend.config import Config
from blog_backend.db import connect, insert_returning_id, is_row_id, is_unique_violation
from blog_backend.errors import ConflictError, ValidationError
from blog_backend.util.time import utcnow_iso

from .security import dummy_verify, hash_password, verify_password


def _debug(msg: str) -> None:
    print(f"[auth] {msg}")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def public_user(row: Any | Dict[str, Any]) -> Dict[str, Any]:
    d = dict(row)
    d.pop("password_hash", None)
    d["is_admin"] = bool(d.get("is_admin"))
    return d


def get_user_by_email(conn: Any, email: str) -> Optional[Any]:
    e = normalize_email(email)
    if not e:
        return None
    return conn.execute(
        "SELECT * FROM users WHERE email=?",
        (e,),
    ).fetchone()


def get_user_by_id(conn: Any, user_id: int) -> Optional[Any]:
    if not is_row_id(user_id):
        return None
    return conn.execute(
        "SELECT * FROM users WHERE user_id=?",
        (int(user_id),),
    ).fetchone()


def list_users(conn: Any) -> List[Dict[str, Any]]:
    rows = conn.execute("SELECT * FROM users ORDER BY user_id").fetchall()
    return [public_user(r) for r in rows]


def verify_user_credentials(conn: Any, email: str, password: str) -> Optional[Any]:
    """Return the user row when email + password match, else None.

    Callers get no hint whether the email exists.
    """
    row = get_user_by_email(conn, email)
    if row is None:
        # Same hashing cost as a wrong password.
        dummy_verify()
        return None
    if not verify_password(password, str(row["password_hash"])):
        return None
    return row


def create_user(
    conn: Any,
    *,
    username: str,
    email: str,
    password: str,
    is_admin: bool = False,
) -> Dict[str, Any]:
    """Insert a user. The password is hashed here, before the INSERT runs."""
    name = (username or "").strip()
    e = normalize_email(email)
    if not name or not e:
        raise ValidationError("missing_fields")
    if not password:
        raise ValidationError("missing_fields")

    if get_user_by_email(conn, e) is not None:
        raise ConflictError("email_exists")

    password_hash = hash_password(password)
    now = utcnow_iso()
    try:
        user_id = insert_returning_id(
            conn,
            """
            INSERT INTO users (username, email, password_hash, is_admin, created_at, updated_at)
            VALUES (?,?,?,?,?,?)
            """,
            (name, e, password_hash, 1 if is_admin else 0, now, now),
            id_col="user_id",
        )
    except Exception as exc:
        # Lost a race with a concurrent registration for the same email.
        if is_unique_violation(exc):
            raise ConflictError("email_exists") from exc
        raise

    row = get_user_by_id(conn, user_id)
    assert row is not None
    _debug(f"Created user user_id={user_id} is_admin={bool(is_admin)}")
    return public_user(row)


def delete_user(conn: Any, user_id: int) -> bool:
    """Hard-delete a user; their posts and comments go with them (ON DELETE CASCADE).

    No route exposes this. It is for maintenance scripts and tests.
    """
    if not is_row_id(user_id):
        return False
    cur = conn.execute("DELETE FROM users WHERE user_id=?", (int(user_id),))
    return cur.rowcount > 0


def users_empty(conn: Any) -> bool:
    n = conn.execute("SELECT COUNT(*) AS n FROM users").fetchone()["n"]
    return int(n) == 0


def bootstrap_admin_if_needed(cfg: Config) -> Optional[Dict[str, Any]]:
    """Create the first admin user if the users table is empty.

    - AUTH_BOOTSTRAP_ADMIN_EMAIL
    - AUTH_BOOTSTRAP_ADMIN_PASSWORD
    - AUTH_BOOTSTRAP_ADMIN_USERNAME (default: admin)

    Only runs when there are 0 rows in `users` and both email and password are set.
    """
    email = normalize_email(cfg.AUTH_BOOTSTRAP_ADMIN_EMAIL or "")
    password = cfg.AUTH_BOOTSTRAP_ADMIN_PASSWORD or ""
    if not email or not password:
        return None

    with connect(cfg.DB_DSN) as conn:
        if not users_empty(conn):
            return None
        username = (cfg.AUTH_BOOTSTRAP_ADMIN_USERNAME or "").strip() or "admin"
        return create_user(conn, username=username, email=email, password=password, is_admin=True)
