from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import Session, sessionmaker

from .config import settings


def _connect_args(url: URL) -> dict[str, Any]:
    backend = url.get_backend_name()
    if backend == "sqlite":
        return {"check_same_thread": False}
    if settings.db_ssl and backend == "mysql":
        # TLS without certificate verification.
        return {"ssl": {"check_hostname": False}}
    return {}


def build_engine(database_url: str | URL, pool_size: int | None = None, **options: Any) -> Engine:
    """Create an engine for ``database_url``.

    SQLite URLs get the default pool; server databases get a bounded QueuePool
    sized from settings unless ``pool_size`` overrides it.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        return create_engine(url, connect_args=_connect_args(url), future=True, **options)

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=pool_size or settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        connect_args=_connect_args(url),
        future=True,
        **options,
    )


class Database:
    """Process-wide connection pool shared by every request handler.

    The engine is built on first use, so a malformed URL surfaces as a
    ``SQLAlchemyError`` inside a request instead of at import time.
    """

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self._engine: Engine | None = None
        self._sessions: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = build_engine(self.database_url)
        return self._engine

    @contextmanager
    def session(self) -> Iterator[Session]:
        if self._sessions is None:
            self._sessions = sessionmaker(
                bind=self.engine,
                autoflush=False,
                expire_on_commit=False,
                class_=Session,
            )
        session = self._sessions()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def check_connection(self) -> None:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()


_DATABASE = Database(settings.database_url)


def get_database() -> Database:
    return _DATABASE


def reset_database_engine(database_url: str | None = None) -> None:
    global _DATABASE
    if database_url:
        object.__setattr__(settings, "database_url", database_url)

    _DATABASE.dispose()
    _DATABASE = Database(settings.database_url)


@contextmanager
def get_db() -> Iterator[Session]:
    with get_database().session() as session:
        yield session
