from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Sequence
from urllib.parse import urlparse

from fastapi import HTTPException

from blog_backend.errors import InternalError
from blog_backend.schema import get_schema_sql


def _debug(msg: str) -> None:
    print(f"[db] {msg}")


def _detect_dialect(dsn: str) -> str:
    """Return 'postgres' or 'sqlite'."""
    s = (dsn or "").strip()
    if not s:
        return "sqlite"
    try:
        scheme = urlparse(s).scheme.lower()
    except Exception:
        scheme = ""
    if scheme in ("postgres", "postgresql"):
        return "postgres"
    # Allow sqlite:///path style, but default is file path.
    return "sqlite"


def _qmark_to_pct(sql: str) -> str:
    """Convert SQLite qmark placeholders (?) to psycopg2 placeholders (%s).

    Skips '?' inside single/double-quoted string literals. Not a full SQL
    parser, but enough for the statements in this codebase.
    """
    out: List[str] = []
    in_single = False
    in_double = False
    i = 0
    while i < len(sql):
        ch = sql[i]

        if ch == "'" and not in_double:
            out.append(ch)
            if in_single:
                # Escaped single quote: ''
                if i + 1 < len(sql) and sql[i + 1] == "'":
                    out.append("'")
                    i += 2
                    continue
                in_single = False
            else:
                in_single = True
            i += 1
            continue

        if ch == '"' and not in_single:
            out.append(ch)
            in_double = not in_double
            i += 1
            continue

        if ch == "?" and not in_single and not in_double:
            out.append("%s")
            i += 1
            continue

        out.append(ch)
        i += 1

    return "".join(out)


class PGCursor:
    def __init__(self, cur: Any):
        self._cur = cur

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> "PGCursor":
        self._cur.execute(_qmark_to_pct(sql), tuple(params or ()))
        return self

    def fetchone(self) -> Any:
        return self._cur.fetchone()

    def fetchall(self) -> Any:
        return self._cur.fetchall()

    @property
    def rowcount(self) -> int:
        try:
            return int(self._cur.rowcount or 0)
        except Exception:
            return 0

    def close(self) -> None:
        self._cur.close()


class PGConnection:
    """A tiny adapter that makes psycopg2 connections look like sqlite3 connections."""

    dialect = "postgres"

    def __init__(self, conn: Any):
        self._conn = conn

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> PGCursor:
        wrapper = PGCursor(self._conn.cursor())
        wrapper.execute(sql, params)
        return wrapper

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        self._conn.close()


# Primary keys are signed 64-bit on both engines.
MAX_ROW_ID = 2**63 - 1


def is_row_id(value: int) -> bool:
    """True when `value` fits a primary key column; anything else can never match a row."""
    return 1 <= int(value) <= MAX_ROW_ID


def dialect_of(conn: Any) -> str:
    return getattr(conn, "dialect", "sqlite")


@contextmanager
def connect(db_dsn: str) -> Iterator[Any]:
    """Open a connection for one unit of work: commit on success, rollback on error.

    - SQLite: WAL + NORMAL sync, foreign keys enforced.
    - Postgres: psycopg2 with RealDictCursor so rows behave like dicts.
    """
    dsn = (db_dsn or "").strip()
    dialect = _detect_dialect(dsn)

    if dialect == "postgres":
        try:
            import psycopg2
            import psycopg2.extras
        except Exception as e:
            raise RuntimeError(
                "Postgres selected but psycopg2 is not installed. "
                "Install psycopg2-binary and try again."
            ) from e

        raw = psycopg2.connect(dsn, cursor_factory=psycopg2.extras.RealDictCursor)
        conn = PGConnection(raw)
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
        return

    # Support sqlite:///path style
    if dsn.lower().startswith("sqlite:///"):
        dsn = dsn[len("sqlite:///") :]

    Path(dsn).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(dsn, timeout=30, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA busy_timeout=5000;")  # 5s
    try:
        # Per-connection in SQLite; required for ON DELETE CASCADE.
        conn.execute("PRAGMA foreign_keys = ON;")
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_dsn: str) -> None:
    """Create all tables (idempotent)."""
    dialect = _detect_dialect(db_dsn)
    _debug(f"Initializing DB ({dialect}) at {db_dsn}")
    with connect(db_dsn) as conn:
        ddl = get_schema_sql(dialect)
        if dialect == "postgres":
            # Naive split is OK for our schema
            for stmt in [s.strip() for s in ddl.split(";") if s.strip()]:
                conn.execute(stmt)
            return
        conn.executescript(ddl)


def insert_returning_id(conn: Any, sql: str, params: Sequence[Any], *, id_col: str) -> int:
    """Run an INSERT and return the generated primary key on either engine."""
    if dialect_of(conn) == "postgres":
        row = conn.execute(f"{sql.rstrip()} RETURNING {id_col}", params).fetchone()
        return int(row[id_col])
    cur = conn.execute(sql, params)
    return int(cur.lastrowid)


def is_unique_violation(exc: BaseException) -> bool:
    """True when `exc` is a UNIQUE constraint failure from sqlite3 or psycopg2."""
    if isinstance(exc, sqlite3.IntegrityError):
        return "UNIQUE" in str(exc).upper()
    # psycopg2 exposes the SQLSTATE as pgcode; 23505 = unique_violation
    return getattr(exc, "pgcode", None) == "23505"


@contextmanager
def db_session(db_dsn: str) -> Iterator[Any]:
    """`connect` for request handlers: unexpected faults surface as InternalError.

    API errors raised inside the block propagate unchanged (after rollback).
    The underlying exception text is logged, never returned to the client.
    """
    try:
        with connect(db_dsn) as conn:
            yield conn
    except HTTPException:
        raise
    except Exception as e:
        _debug(f"persistence error: {type(e).__name__}: {e}")
        raise InternalError() from e
