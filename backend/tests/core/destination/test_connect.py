"""Unit tests for core.destination.connect: URL parsing and driver arguments (drivers mocked)."""

from unittest.mock import MagicMock, patch

import pytest

from app.core.config import settings
from app.core.destination import (
    MySQLConnector,
    PostgresConnector,
    TrinoConnector,
    parse_destination_url,
)
from app.core.errors import UnsupportedDestinationError


def test_parse_jdbc_url() -> None:
    u = parse_destination_url("jdbc:mysql://localhost:3306/forms?user=u&password=p")
    assert u.drivername == "mysql"
    assert (u.host, u.port, u.database) == ("localhost", 3306, "forms")


def test_parse_invalid_url() -> None:
    with pytest.raises(UnsupportedDestinationError):
        parse_destination_url("jdbc:mysql:not a url")


@patch("app.core.destination.connect.pymysql.connect")
def test_mysql_jdbc_credentials_from_query(mock_connect: MagicMock) -> None:
    conn = MySQLConnector().connect("jdbc:mysql://db.local:3307/forms?user=app&password=secret")
    assert conn is mock_connect.return_value
    mock_connect.assert_called_once_with(
        host="db.local",
        port=3307,
        database="forms",
        user="app",
        password="secret",
        connect_timeout=settings.EXTERNAL_DB_CONNECT_TIMEOUT,
    )


@patch("app.core.destination.connect.pymysql.connect")
def test_mysql_default_port_and_authority_credentials(mock_connect: MagicMock) -> None:
    MySQLConnector().connect("mysql://app:pw@db.local/forms")
    kwargs = mock_connect.call_args.kwargs
    assert kwargs["port"] == 3306
    assert (kwargs["user"], kwargs["password"]) == ("app", "pw")


@patch("app.core.destination.connect.psycopg.connect")
def test_postgres_connect(mock_connect: MagicMock) -> None:
    PostgresConnector().connect("postgres://app@db.local/forms")
    mock_connect.assert_called_once_with(
        host="db.local",
        port=5432,
        dbname="forms",
        user="app",
        password="",
        connect_timeout=settings.EXTERNAL_DB_CONNECT_TIMEOUT,
    )


@patch("app.core.destination.connect.psycopg.connect")
def test_missing_host(mock_connect: MagicMock) -> None:
    with pytest.raises(ValueError, match="host"):
        PostgresConnector().connect("postgresql:///forms")
    mock_connect.assert_not_called()


@patch("app.core.destination.connect.trino_connect")
def test_trino_catalog_and_schema(mock_connect: MagicMock) -> None:
    TrinoConnector().connect("trino://admin@trino.local:8443/hive/sales")
    kwargs = mock_connect.call_args.kwargs
    assert (kwargs["catalog"], kwargs["schema"]) == ("hive", "sales")
    assert kwargs["http_scheme"] == "http"
    assert kwargs["auth"] is None


@patch("app.core.destination.connect.trino_connect")
def test_trino_ssl_requires_password(mock_connect: MagicMock) -> None:
    with pytest.raises(ValueError, match="Password is required"):
        TrinoConnector().connect("trino://admin@trino.local/hive?ssl=true")
    mock_connect.assert_not_called()


@patch("app.core.destination.connect.trino_connect")
def test_trino_ssl(mock_connect: MagicMock) -> None:
    TrinoConnector().connect("trino://admin:pw@trino.local/hive?ssl=true")
    kwargs = mock_connect.call_args.kwargs
    assert kwargs["http_scheme"] == "https"
    assert kwargs["schema"] == "default"
    assert kwargs["auth"] is not None


def test_paramstyles() -> None:
    assert MySQLConnector.paramstyle == "format"
    assert PostgresConnector.paramstyle == "format"
    assert TrinoConnector.paramstyle == "qmark"


def test_prepare_returns_statement() -> None:
    stmt = MySQLConnector().prepare(MagicMock(), "INSERT INTO t (a) VALUES (%s)", 1)
    assert stmt.arity == 1
    assert stmt.query == "INSERT INTO t (a) VALUES (%s)"
