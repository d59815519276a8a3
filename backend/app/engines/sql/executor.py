"""
Write one form submission as a single-row INSERT.

Flow: resolve connector -> synthesize template -> compile -> connect ->
prepare -> bind -> execute -> commit. Steps run sequentially; nothing is
retried. Connection and statement are released on every exit path.
"""

import logging
from collections.abc import Mapping
from typing import Any

from app.core.destination import ConnectorRegistry, get_connector_registry
from app.core.errors import StatementExecutionError
from app.engines.sql.binder import bind
from app.engines.sql.synthesizer import _get, synthesize_insert
from app.engines.sql.template import compile_template

_log = logging.getLogger(__name__)


def write_submission(
    schema: Any,
    destination: Any,
    data: Mapping[str, Any],
    *,
    registry: ConnectorRegistry | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> int:
    """
    Insert *data* into ``destination.table`` of the database at ``destination.url``.

    Returns the affected row count. Raises UnsupportedDestinationError,
    UnsupportedSchemaTypeError, StatementBindError subclasses (statement not
    executed) or StatementExecutionError (driver failure).
    """
    log = logger or _log
    url = _get(destination, "url")
    connector = (registry or get_connector_registry()).resolve(url)

    template = synthesize_insert(schema, destination, data, logger=log)
    compiled = compile_template(template, paramstyle=connector.paramstyle)

    conn: Any = None
    stmt: Any = None
    try:
        try:
            conn = connector.connect(url)
        except connector.driver_errors as e:
            raise StatementExecutionError(f"Cannot connect to destination: {e}") from e

        stmt = connector.prepare(conn, compiled.query, compiled.arity)
        bind(stmt, compiled.placeholders, data, template=template, logger=log)

        try:
            rowcount = stmt.execute_update()
            conn.commit()
        except connector.driver_errors as e:
            raise StatementExecutionError(str(e)) from e

        log.info("inserted %d row(s) with: %s", rowcount, compiled.query)
        return rowcount
    except Exception:
        # If anything fails, rollback before releasing the connection
        if conn is not None:
            try:
                conn.rollback()
            except Exception:
                log.debug("rollback failed", exc_info=True)
        raise
    finally:
        if stmt is not None:
            stmt.close()
        if conn is not None:
            try:
                conn.close()
            except Exception:
                log.debug("closing destination connection failed", exc_info=True)
