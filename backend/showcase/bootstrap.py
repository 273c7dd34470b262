"""Startup bootstrap: make sure the database, its tables and the seed data exist.

The procedure runs once per process, before the HTTP listener binds. It never
raises: failures are logged and reported through :class:`BootstrapResult`, and
the application keeps running in degraded mode.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional

from sqlalchemy import Connection, Engine, func, select, text
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import Session

from .config import settings
from .db import build_engine
from .metrics import BOOTSTRAP_RUNS_TOTAL
from .models import Base, Metric, Project, User

logger = logging.getLogger("showcase.bootstrap")

SAMPLE_USERS = [
    ("John Doe", "john@example.com", "admin"),
    ("Jane Smith", "jane@example.com", "developer"),
    ("Mike Johnson", "mike@example.com", "designer"),
    ("Sarah Wilson", "sarah@example.com", "user"),
]

# (title, description, status, index into SAMPLE_USERS)
SAMPLE_PROJECTS = [
    ("Website Redesign", "Complete overhaul of company website with modern design", "in-progress", 0),
    ("Mobile App Development", "Native mobile app for iOS and Android platforms", "planning", 1),
    ("Database Optimization", "Improve database performance and scalability", "completed", 1),
    ("User Authentication System", "Implement secure login and registration system", "in-progress", 0),
    ("API Documentation", "Create comprehensive API documentation", "planning", 1),
]

SAMPLE_METRICS = {
    "total_users": 4,
    "total_projects": 5,
    "completed_projects": 1,
    "active_projects": 2,
}


@dataclass(frozen=True)
class BootstrapResult:
    ok: bool
    seeded: bool = False
    existing_users: Optional[int] = None
    step: Optional[str] = None
    error: Optional[str] = None


def _server_url(url: URL) -> URL | None:
    """URL of the database server itself, or None for file-backed SQLite."""
    backend = url.get_backend_name()
    if backend == "sqlite":
        return None
    if backend == "postgresql":
        return url.set(database="postgres")
    return url.set(database=None)


def ensure_database(connection: Connection, name: str) -> None:
    quoted = connection.dialect.identifier_preparer.quote(name)
    if connection.dialect.name == "postgresql":
        exists = connection.execute(
            text("SELECT 1 FROM pg_database WHERE datname = :name"),
            {"name": name},
        ).scalar()
        if not exists:
            connection.execute(text(f"CREATE DATABASE {quoted}"))
        return

    connection.execute(text(f"CREATE DATABASE IF NOT EXISTS {quoted}"))


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine, checkfirst=True)


def count_users(connection: Connection) -> int:
    return connection.execute(select(func.count()).select_from(User)).scalar_one()


def upsert_metrics(connection: Connection, values: dict[str, int]) -> None:
    """Insert metrics, overwriting the value of any metric that already exists."""
    rows = [{"metric_name": name, "metric_value": value} for name, value in values.items()]
    table = Metric.__table__
    dialect = connection.dialect.name

    if dialect == "mysql":
        stmt = mysql.insert(table).values(rows)
        stmt = stmt.on_duplicate_key_update(
            metric_value=stmt.inserted.metric_value,
            updated_at=func.now(),
        )
    elif dialect in {"postgresql", "sqlite"}:
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = insert(table).values(rows)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.metric_name],
            set_={"metric_value": stmt.excluded.metric_value, "updated_at": func.now()},
        )
    else:
        raise NotImplementedError(f"Metric upsert is not supported for dialect {dialect!r}")

    connection.execute(stmt)


def seed_sample_data(engine: Engine) -> None:
    # Users and projects are plain inserts; only the metrics are upserted.
    with Session(engine) as session, session.begin():
        users = [User(name=name, email=email, role=role) for name, email, role in SAMPLE_USERS]
        session.add_all(users)
        session.flush()

        session.add_all(
            [
                Project(title=title, description=description, status=status, user_id=users[owner].id)
                for title, description, status, owner in SAMPLE_PROJECTS
            ]
        )
        upsert_metrics(session.connection(), SAMPLE_METRICS)


def _release(engine: Engine | None, label: str) -> None:
    if engine is None:
        return
    try:
        engine.dispose()
    except Exception:
        logger.warning(
            "Failed to release bootstrap connection pool",
            exc_info=True,
            extra={"event": "bootstrap_release_failed", "step": label},
        )


def bootstrap_database(database_url: str | None = None) -> BootstrapResult:
    database: str | None = None
    server_engine: Engine | None = None
    engine: Engine | None = None
    step = "resolve_url"

    try:
        url = make_url(database_url or settings.database_url)
        database = url.database
        step = "connect_server"
        logger.info(
            "Starting database initialization",
            extra={"event": "bootstrap_start", "database": database, "db_backend": url.get_backend_name()},
        )

        server_url = _server_url(url)
        if server_url is not None:
            if not database:
                raise ValueError("Database name is not configured")
            server_engine = build_engine(
                server_url,
                pool_size=settings.bootstrap_pool_size,
                isolation_level="AUTOCOMMIT",
            )
            with server_engine.connect() as connection:
                step = "create_database"
                ensure_database(connection, database)
            logger.info("Database is ready", extra={"event": "bootstrap_database_ready", "database": database})

            step = "release_server"
            server_engine.dispose()
            server_engine = None

        step = "create_schema"
        engine = build_engine(url, pool_size=settings.bootstrap_pool_size)
        create_schema(engine)

        step = "count_users"
        with engine.connect() as connection:
            existing_users = count_users(connection)
        logger.info(
            "Found existing users",
            extra={"event": "bootstrap_user_count", "existing_users": existing_users},
        )

        seeded = False
        if existing_users == 0:
            step = "seed"
            seed_sample_data(engine)
            seeded = True
            logger.info("Sample data inserted", extra={"event": "bootstrap_seeded", "database": database})

        step = "release"
        engine.dispose()
        engine = None
    except Exception as exc:
        logger.exception(
            "Database initialization failed, app will continue with limited functionality",
            extra={"event": "bootstrap_failed", "step": step, "database": database},
        )
        _release(server_engine, "server")
        _release(engine, "database")
        BOOTSTRAP_RUNS_TOTAL.labels(outcome="failed").inc()
        return BootstrapResult(ok=False, step=step, error=str(exc))

    BOOTSTRAP_RUNS_TOTAL.labels(outcome="ok").inc()
    logger.info(
        "Database initialization completed",
        extra={"event": "bootstrap_complete", "database": database, "seeded": seeded},
    )
    return BootstrapResult(ok=True, seeded=seeded, existing_users=existing_users)
