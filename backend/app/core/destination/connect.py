"""
Connectors for destination databases.

Uses psycopg (PostgreSQL), pymysql (MySQL), or trino (Trino) based on the
destination URL scheme. Each connector opens a connection from a URL and
prepares positional statements for it; the registry in ``resolver`` picks the
connector by URL prefix.

URLs are parsed with SQLAlchemy's ``make_url`` after stripping a leading
``jdbc:``, so both ``mysql://u:p@host:3306/db`` and the JDBC form
``jdbc:mysql://host:3306/db?user=u&password=p`` are accepted.
"""

import logging
from typing import Any, ClassVar

import psycopg
import pymysql
import trino.exceptions
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError
from trino.auth import BasicAuthentication
from trino.dbapi import connect as trino_connect

from app.core.config import settings
from app.core.errors import UnsupportedDestinationError

from .statement import PreparedStatement

_log = logging.getLogger(__name__)

_JDBC_PREFIX = "jdbc:"


def parse_destination_url(url: str) -> URL:
    """Parse a destination URL (optionally ``jdbc:``-prefixed) into a SQLAlchemy URL."""
    raw = url[len(_JDBC_PREFIX) :] if url.startswith(_JDBC_PREFIX) else url
    try:
        return make_url(raw)
    except ArgumentError as e:
        raise UnsupportedDestinationError(url) from e


def _query_arg(u: URL, key: str) -> str | None:
    v = u.query.get(key)
    if isinstance(v, tuple):
        return v[-1] if v else None
    return v


def _credentials(u: URL) -> tuple[str | None, str]:
    """Username/password from the URL authority, falling back to JDBC query args."""
    username = u.username or _query_arg(u, "user")
    password = u.password if u.password is not None else _query_arg(u, "password")
    return username, password or ""


class Connector:
    """
    One destination driver family.

    - schemes: URL prefixes this connector accepts (e.g. ``mysql://``).
    - paramstyle: positional marker style the driver expects (``qmark``/``format``).
    - driver_errors: exception types the writer reports as execution errors.
    """

    name: ClassVar[str] = ""
    schemes: ClassVar[tuple[str, ...]] = ()
    paramstyle: ClassVar[str] = "qmark"
    driver_errors: ClassVar[tuple[type[BaseException], ...]] = ()
    default_port: ClassVar[int | None] = None

    def accepts(self, url: str) -> str | None:
        """Return the matching prefix of *url*, or None."""
        for prefix in self.schemes:
            if url.startswith(prefix):
                return prefix
        return None

    def connect(self, url: str) -> Any:
        raise NotImplementedError

    def prepare(self, conn: Any, query: str, arity: int) -> PreparedStatement:
        _log.debug("query to prepare statement with: %s", query)
        return PreparedStatement(conn, query, arity)

    def _require(self, u: URL, url: str) -> tuple[str, int, str | None, str | None, str]:
        host = u.host
        if not host:
            raise ValueError(f"destination URL must provide a host: {url}")
        port = u.port or self.default_port
        username, password = _credentials(u)
        return host, int(port), u.database, username, password

    def __repr__(self) -> str:
        return f"<{type(self).__name__} schemes={list(self.schemes)}>"


class MySQLConnector(Connector):
    name = "mysql"
    schemes = ("jdbc:mysql:", "mysql://", "mysql+pymysql://")
    paramstyle = "format"
    driver_errors = (pymysql.MySQLError,)
    default_port = 3306

    def connect(self, url: str) -> Any:
        u = parse_destination_url(url)
        host, port, database, username, password = self._require(u, url)
        return pymysql.connect(
            host=host,
            port=port,
            database=database,
            user=username,
            password=password,
            connect_timeout=settings.EXTERNAL_DB_CONNECT_TIMEOUT,
        )


class PostgresConnector(Connector):
    name = "postgres"
    schemes = (
        "jdbc:postgresql:",
        "postgresql://",
        "postgres://",
        "postgresql+psycopg://",
    )
    paramstyle = "format"
    driver_errors = (psycopg.Error,)
    default_port = 5432

    def connect(self, url: str) -> Any:
        u = parse_destination_url(url)
        host, port, database, username, password = self._require(u, url)
        return psycopg.connect(
            host=host,
            port=port,
            dbname=database,
            user=username,
            password=password,
            connect_timeout=settings.EXTERNAL_DB_CONNECT_TIMEOUT,
        )


class TrinoConnector(Connector):
    """
    Trino: database path is ``<catalog>[/<schema>]``; ``?ssl=true`` selects HTTPS.
    """

    name = "trino"
    schemes = ("trino://",)
    paramstyle = "qmark"
    driver_errors = (
        trino.exceptions.Error,
        trino.exceptions.TrinoQueryError,
        trino.exceptions.HttpError,
    )
    default_port = 8080

    def connect(self, url: str) -> Any:
        u = parse_destination_url(url)
        host, port, database, username, password = self._require(u, url)
        if not username:
            raise ValueError("Trino destination URL must provide a user.")
        catalog, _, schema = (database or "").partition("/")
        use_ssl = (_query_arg(u, "ssl") or "").lower() in ("true", "1")
        if use_ssl and not password.strip():
            raise ValueError("Password is required for Trino when using SSL/HTTPS.")
        return trino_connect(
            host=host,
            port=port,
            user=username,
            auth=BasicAuthentication(username, password) if use_ssl else None,
            catalog=catalog or None,
            schema=schema or "default",
            source="formsink",
            http_scheme="https" if use_ssl else "http",
            request_timeout=settings.EXTERNAL_DB_CONNECT_TIMEOUT,
        )


BUILTIN_CONNECTORS: dict[str, type[Connector]] = {
    MySQLConnector.name: MySQLConnector,
    PostgresConnector.name: PostgresConnector,
    TrinoConnector.name: TrinoConnector,
}
