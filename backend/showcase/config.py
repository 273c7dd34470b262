from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv
from sqlalchemy.engine import URL

load_dotenv()


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_optional_int(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _normalize_database_url(value: str) -> str:
    raw = value.strip()
    # Some dashboards accidentally store quoted values.
    if (raw.startswith('"') and raw.endswith('"')) or (raw.startswith("'") and raw.endswith("'")):
        raw = raw[1:-1].strip()

    if "://" not in raw:
        return raw

    scheme, suffix = raw.split("://", 1)
    scheme = scheme.lower()

    if scheme in {
        "postgres",
        "postgresql",
        "postgresql+psycopg",
        "postgresql+asyncpg",
        "postgresql+pg8000",
        "postgresql+psycopg2",
    }:
        url = f"postgresql+psycopg2://{suffix}"
        if "sslmode" not in url:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}sslmode=require"
        return url

    if scheme in {"mysql", "mysql+mysqldb"}:
        return f"mysql+pymysql://{suffix}"

    return raw


def _database_url_from_parts(
    driver: str,
    host: str | None,
    port: int | None,
    user: str | None,
    password: str | None,
    name: str | None,
) -> str:
    """Assemble a URL from the DB_* variables; missing parts surface at connect time."""
    url = URL.create(
        driver,
        username=user or None,
        password=password or None,
        host=host or None,
        port=port,
        database=name or None,
    )
    return url.render_as_string(hide_password=False)


@dataclass(frozen=True)
class Settings:
    port: int
    database_url: str
    db_ssl: bool
    db_pool_size: int
    db_max_overflow: int
    db_pool_timeout: int
    db_pool_recycle: int
    bootstrap_pool_size: int
    bootstrap_on_startup: bool
    enable_prometheus_metrics: bool
    log_level: str

    @property
    def db_backend(self) -> str:
        return self.database_url.split(":", 1)[0].split("+", 1)[0]


def _resolve_database_url() -> str:
    explicit = os.getenv("DATABASE_URL")
    if explicit and explicit.strip():
        return _normalize_database_url(explicit)
    return _database_url_from_parts(
        driver=os.getenv("DB_DRIVER", "mysql+pymysql").strip(),
        host=os.getenv("DB_HOST"),
        port=_as_optional_int(os.getenv("DB_PORT")),
        user=os.getenv("DB_USER"),
        password=os.getenv("DB_PASSWORD"),
        name=os.getenv("DB_NAME"),
    )


settings = Settings(
    port=_as_int(os.getenv("PORT"), 3000),
    database_url=_resolve_database_url(),
    db_ssl=_as_bool(os.getenv("DB_SSL"), True),
    db_pool_size=max(1, _as_int(os.getenv("DB_POOL_SIZE"), 10)),
    db_max_overflow=max(0, _as_int(os.getenv("DB_MAX_OVERFLOW"), 0)),
    db_pool_timeout=max(1, _as_int(os.getenv("DB_POOL_TIMEOUT"), 60)),
    db_pool_recycle=max(60, _as_int(os.getenv("DB_POOL_RECYCLE"), 1800)),
    bootstrap_pool_size=max(1, _as_int(os.getenv("BOOTSTRAP_POOL_SIZE"), 5)),
    bootstrap_on_startup=_as_bool(os.getenv("BOOTSTRAP_ON_STARTUP"), True),
    enable_prometheus_metrics=_as_bool(os.getenv("ENABLE_PROMETHEUS_METRICS"), True),
    log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
)
