import os

import pytest
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from showcase.config import _as_bool, _as_int, _database_url_from_parts, _normalize_database_url, settings
from showcase.db import Database, _connect_args


def test_postgres_urls_are_forced_to_psycopg2_with_ssl():
    assert _normalize_database_url("postgres://u:p@db:5432/app") == (
        "postgresql+psycopg2://u:p@db:5432/app?sslmode=require"
    )
    assert _normalize_database_url("postgresql://u:p@db/app?sslmode=disable") == (
        "postgresql+psycopg2://u:p@db/app?sslmode=disable"
    )


def test_mysql_urls_use_pymysql():
    assert _normalize_database_url("mysql://u:p@db:3306/app") == "mysql+pymysql://u:p@db:3306/app"


def test_quoted_and_sqlite_urls_pass_through():
    assert _normalize_database_url('"sqlite:///./showcase.db"') == "sqlite:///./showcase.db"


def test_url_from_parts():
    url = make_url(
        _database_url_from_parts(
            driver="mysql+pymysql",
            host="db.example.com",
            port=3306,
            user="app",
            password="secret",
            name="showcase",
        )
    )

    assert url.drivername == "mysql+pymysql"
    assert url.host == "db.example.com"
    assert url.port == 3306
    assert url.username == "app"
    assert url.password == "secret"
    assert url.database == "showcase"


def test_url_from_missing_parts_defers_failure_to_connect_time():
    url = make_url(_database_url_from_parts("mysql+pymysql", None, None, None, None, None))

    assert url.drivername == "mysql+pymysql"
    assert url.host is None
    assert url.database is None


def test_env_value_parsing():
    assert _as_bool("Yes", False) is True
    assert _as_bool(None, True) is True
    assert _as_int("abc", 3000) == 3000
    assert _as_int("8080", 3000) == 8080


def test_mysql_connections_use_tls_unless_disabled():
    mysql_url = make_url("mysql+pymysql://u:p@db.example.com/app")
    original_ssl = settings.db_ssl
    try:
        object.__setattr__(settings, "db_ssl", True)
        assert _connect_args(mysql_url) == {"ssl": {"check_hostname": False}}
        assert _connect_args(make_url("postgresql+psycopg2://u:p@db/app")) == {}

        object.__setattr__(settings, "db_ssl", False)
        assert _connect_args(mysql_url) == {}
    finally:
        object.__setattr__(settings, "db_ssl", original_ssl)


@pytest.mark.skipif("DB_SSL" in os.environ, reason="DB_SSL is set in the environment")
def test_tls_is_on_by_default():
    assert settings.db_ssl is True


def test_database_handle_defers_url_parsing():
    database = Database("not a url")

    database.dispose()
    with pytest.raises(ArgumentError):
        database.check_connection()


def test_settings_carry_only_used_fields():
    assert not hasattr(settings, "env")
    assert not hasattr(settings, "is_sqlite")
