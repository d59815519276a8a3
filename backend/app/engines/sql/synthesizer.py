"""
Build an INSERT template from a form schema and the submitted data, e.g.::

    INSERT INTO todo (title,done) VALUES ({title:string},{done:boolean})

Only properties present in the data become columns, in schema order.
"""

import logging
from collections.abc import Mapping
from typing import Any

from app.core.errors import UnsupportedSchemaTypeError
from app.engines.sql.template import DEFAULT_TYPE

_log = logging.getLogger(__name__)


def _get(obj: Any, key: str) -> Any:
    """Get attribute or dict key from a pydantic model or mapping."""
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def synthesize_insert(
    schema: Any,
    destination: Any,
    data: Mapping[str, Any],
    *,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> str:
    """
    Return the INSERT template for *data* written to ``destination.table``.

    The table name is used verbatim. If no property is present in *data* the
    column list is empty; the database rejects that statement.
    """
    log = logger or _log
    schema_type = _get(schema, "type")
    if schema_type != "object":
        raise UnsupportedSchemaTypeError(schema_type)

    table = _get(destination, "table")
    fields: list[str] = []
    values: list[str] = []
    for name, desc in (_get(schema, "properties") or {}).items():
        if name in data:
            fields.append(name)
            values.append("{%s:%s}" % (name, _get(desc, "type") or DEFAULT_TYPE))

    sql = f"INSERT INTO {table} ({','.join(fields)}) VALUES ({','.join(values)})"
    log.debug("insert template: %s, params: %s", sql, data)
    return sql
