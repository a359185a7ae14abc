from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from blog_backend.api.server import create_app
from blog_backend.auth.crud import create_user
from blog_backend.config import Config
from blog_backend.db import connect, init_db

SECRET = "test-secret"


@pytest.fixture
def cfg(tmp_path) -> Config:
    return Config(
        DB_DSN=str(tmp_path / "blog.sqlite"),
        APP_ENV="development",
        AUTH_JWT_SECRET=SECRET,
        AUTH_TOKEN_EXPIRE_MINUTES=60,
        AUTH_COOKIE_NAME="token",
        AUTH_BOOTSTRAP_ADMIN_EMAIL=None,
        AUTH_BOOTSTRAP_ADMIN_PASSWORD=None,
        SEED_DEMO_DATA=False,
        CORS_ALLOW_ORIGINS="",
    )


@pytest.fixture
def conn(cfg: Config) -> Iterator[Any]:
    init_db(cfg.DB_DSN)
    with connect(cfg.DB_DSN) as c:
        yield c


@pytest.fixture
def app(cfg: Config) -> FastAPI:
    return create_app(cfg)


@pytest.fixture
def make_client(app: FastAPI) -> Iterator[Callable[[], TestClient]]:
    """Independent clients (separate cookie jars) against the same app."""
    opened: List[TestClient] = []

    def _make() -> TestClient:
        c = TestClient(app)
        c.__enter__()
        opened.append(c)
        return c

    yield _make
    for c in opened:
        c.__exit__(None, None, None)


@pytest.fixture
def client(make_client: Callable[[], TestClient]) -> TestClient:
    return make_client()


def register(client: TestClient, name: str, password: str = "pw1") -> Dict[str, Any]:
    r = client.post(
        "/register",
        json={
            "username": name,
            "email": f"{name}@x.com",
            "password": password,
            "verifiedPassword": password,
        },
    )
    assert r.status_code == 201, r.text
    return r.json()


def login(client: TestClient, email: str, password: str = "pw1") -> None:
    r = client.post("/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text


@pytest.fixture
def signup(make_client: Callable[[], TestClient]) -> Callable[[str], TestClient]:
    """Register + log in a user; returns a client carrying their session cookie."""

    def _signup(name: str) -> TestClient:
        c = make_client()
        register(c, name)
        login(c, f"{name}@x.com")
        return c

    return _signup


@pytest.fixture
def admin_client(cfg: Config, make_client: Callable[[], TestClient]) -> TestClient:
    c = make_client()  # startup creates the schema
    with connect(cfg.DB_DSN) as db:
        create_user(db, username="root", email="root@x.com", password="rootpw", is_admin=True)
    login(c, "root@x.com", "rootpw")
    return c
