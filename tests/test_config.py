from dataclasses import replace

import pytest

from blog_backend.api.server import create_app
from blog_backend.config import Config, _env_bool, validate_config
from blog_backend.db import _qmark_to_pct
from blog_backend.errors import ConfigError
from blog_backend.schema import get_schema_sql


def test_missing_secret_fails_closed(cfg):
    with pytest.raises(ConfigError):
        create_app(replace(cfg, AUTH_JWT_SECRET=None))
    with pytest.raises(ConfigError):
        create_app(replace(cfg, AUTH_JWT_SECRET="   "))


def test_validate_config_rejects_bad_expiry(cfg):
    with pytest.raises(ConfigError):
        validate_config(replace(cfg, AUTH_TOKEN_EXPIRE_MINUTES=0))
    assert validate_config(cfg) is cfg


def test_cookie_policy_follows_environment():
    dev = Config(APP_ENV="development", AUTH_JWT_SECRET="s")
    prod = Config(APP_ENV="production", AUTH_JWT_SECRET="s")
    assert (dev.cookie_secure, dev.cookie_samesite) == (False, "lax")
    assert (prod.cookie_secure, prod.cookie_samesite) == (True, "strict")


def test_env_bool(monkeypatch):
    monkeypatch.setenv("X_FLAG", " Yes ")
    assert _env_bool("X_FLAG") is True
    monkeypatch.setenv("X_FLAG", "off")
    assert _env_bool("X_FLAG", True) is False
    monkeypatch.setenv("X_FLAG", "maybe")
    assert _env_bool("X_FLAG", None) is None
    monkeypatch.delenv("X_FLAG")
    assert _env_bool("X_FLAG", True) is True


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_postgres_schema_translation():
    ddl = get_schema_sql("postgres")
    assert "PRAGMA" not in ddl
    assert "AUTOINCREMENT" not in ddl
    assert "user_id BIGSERIAL PRIMARY KEY" in ddl
    assert "post_id BIGINT NOT NULL" in ddl
    assert get_schema_sql("sqlite").lstrip().startswith("PRAGMA foreign_keys")


def test_qmark_conversion_skips_literals():
    sql = "SELECT * FROM users WHERE email=? AND username='who?'"
    assert _qmark_to_pct(sql) == "SELECT * FROM users WHERE email=%s AND username='who?'"
