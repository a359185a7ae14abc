import os
from dataclasses import dataclass
from typing import Optional

from blog_backend.errors import ConfigError

# Optional: load a local .env file if present.
try:
    from dotenv import load_dotenv

    load_dotenv()
except Exception:
    # No .env file is fine.
    pass


def _env_bool(name: str, default: Optional[bool] = None) -> Optional[bool]:
    """Parse a boolean environment variable.

    Returns:
      - True/False if the env var is set to a recognizable value
      - default if unset or unrecognized

    Accepted truthy: 1, true, yes, y, on
    Accepted falsy:  0, false, no, n, off
    """

    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    IMPORTANT: Provide the JWT secret via environment variables or a .env file.
    There is no default: the API refuses to start without one.
    """

    # -----------------
    # Core
    # -----------------
    # Preferred: set BLOG_DATABASE_URL (or DATABASE_URL) to use Postgres.
    # Fallback: BLOG_DB_PATH for SQLite.
    DB_DSN: str = (
        os.environ.get("BLOG_DATABASE_URL")
        or os.environ.get("DATABASE_URL")
        or os.environ.get("BLOG_DB_PATH", "./blog.sqlite")
    )

    # "production" turns on Secure + SameSite=Strict session cookies.
    APP_ENV: str = (os.environ.get("APP_ENV") or os.environ.get("NODE_ENV") or "development").strip().lower()

    # -----------------
    # Auth (JWT)
    # -----------------
    AUTH_JWT_SECRET: str | None = os.environ.get("AUTH_JWT_SECRET") or os.environ.get("JWT_SECRET")
    AUTH_TOKEN_EXPIRE_MINUTES: int = int(os.environ.get("AUTH_TOKEN_EXPIRE_MINUTES", "60"))  # 1 hour

    # Session cookie
    AUTH_COOKIE_NAME: str = os.environ.get("AUTH_COOKIE_NAME", "token")
    AUTH_COOKIE_DOMAIN: str | None = (os.environ.get("AUTH_COOKIE_DOMAIN") or "").strip() or None
    AUTH_COOKIE_PATH: str = os.environ.get("AUTH_COOKIE_PATH", "/")

    # Bootstrap first admin user if users table is empty.
    # Nothing is created unless both email and password are set.
    AUTH_BOOTSTRAP_ADMIN_EMAIL: str | None = os.environ.get("AUTH_BOOTSTRAP_ADMIN_EMAIL")
    AUTH_BOOTSTRAP_ADMIN_USERNAME: str = os.environ.get("AUTH_BOOTSTRAP_ADMIN_USERNAME", "admin")
    AUTH_BOOTSTRAP_ADMIN_PASSWORD: str | None = os.environ.get("AUTH_BOOTSTRAP_ADMIN_PASSWORD")

    # Demo user + post on an empty database (local testing only)
    SEED_DEMO_DATA: bool = _env_bool("SEED_DEMO_DATA", False) is True

    # -----------------
    # CORS (development)
    # -----------------
    CORS_ALLOW_ORIGINS: str = os.environ.get(
        "CORS_ALLOW_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000",
    )

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def cookie_secure(self) -> bool:
        return self.is_production

    @property
    def cookie_samesite(self) -> str:
        # Lax in dev so a frontend on another port can still send the cookie.
        return "strict" if self.is_production else "lax"


def load_config() -> Config:
    return Config()


def validate_config(cfg: Config) -> Config:
    """Fail closed on configuration that would disable token verification."""
    if not (cfg.AUTH_JWT_SECRET or "").strip():
        raise ConfigError("AUTH_JWT_SECRET is not set")
    if int(cfg.AUTH_TOKEN_EXPIRE_MINUTES) < 1:
        raise ConfigError("AUTH_TOKEN_EXPIRE_MINUTES must be >= 1")
    return cfg
