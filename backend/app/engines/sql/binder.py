"""
Bind submitted values into the positional slots of a prepared statement.

Supported type tokens:

 - string
 - number, int, integer (aliases)
 - long
 - boolean (truthy -> 1, otherwise 0)

``long`` values are bound through ``set_double``: the incoming value may
already have been parsed as a double by the client, so an integer slot would
not give more precision. Magnitudes above 2**53 are rounded to the nearest
double (9007199254740993 binds as 9007199254740992.0).

All values are resolved and converted before the first slot is written, so a
failure leaves the statement without any bound parameter.
"""

import logging
import math
import re
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any

from app.core.errors import (
    MissingParameterError,
    ParameterCoercionError,
    UnsupportedTypeError,
)
from app.engines.sql.template import Placeholder

_log = logging.getLogger(__name__)


class CoercionRule(str, Enum):
    """How a placeholder value is converted and which slot setter receives it."""

    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    BOOLEAN = "boolean"


# Type tokens are matched case-sensitively.
TYPE_TOKENS: dict[str, CoercionRule] = {
    "string": CoercionRule.STRING,
    "number": CoercionRule.INTEGER,
    "int": CoercionRule.INTEGER,
    "integer": CoercionRule.INTEGER,
    "long": CoercionRule.LONG,
    "boolean": CoercionRule.BOOLEAN,
}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def resolve_rule(type_token: str) -> CoercionRule | None:
    return TYPE_TOKENS.get(type_token)


def parse_int(value: Any) -> int | None:
    """
    Lenient integer parse: ints pass through, finite floats truncate toward
    zero, strings use their leading signed digits ("42abc" -> 42).
    Returns None when nothing can be parsed (booleans and digit runs past
    the interpreter's int conversion limit included).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    m = _LEADING_INT.match(str(value))
    if not m:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        return None


def _to_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_long(value: Any) -> float | None:
    n = parse_int(value)
    if n is None:
        return None
    try:
        return float(n)
    except OverflowError:
        return None


def _to_boolean(value: Any) -> int:
    return 1 if value else 0


_CONVERTERS: dict[CoercionRule, Callable[[Any], Any]] = {
    CoercionRule.STRING: _to_string,
    CoercionRule.INTEGER: parse_int,
    CoercionRule.LONG: _to_long,
    CoercionRule.BOOLEAN: _to_boolean,
}

# PreparedStatement method used for each rule.
_SETTERS: dict[CoercionRule, str] = {
    CoercionRule.STRING: "set_string",
    CoercionRule.INTEGER: "set_int",
    CoercionRule.LONG: "set_double",
    CoercionRule.BOOLEAN: "set_int",
}


def coerce_value(
    placeholder: Placeholder, value: Any, template: str | None = None
) -> tuple[CoercionRule, Any]:
    """Convert *value* for *placeholder*; None stays None (bound as SQL NULL)."""
    rule = resolve_rule(placeholder.type)
    if rule is None:
        raise UnsupportedTypeError(placeholder.name, placeholder.type, template)
    if value is None:
        return rule, None
    converted = _CONVERTERS[rule](value)
    if converted is None:
        raise ParameterCoercionError(placeholder.name, placeholder.type, value, template)
    return rule, converted


def bind(
    statement: Any,
    placeholders: Sequence[Placeholder],
    params: Mapping[str, Any] | None,
    *,
    template: str | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> Any:
    """
    Bind ``params`` into *statement* following *placeholders* (position 1..n).

    - statement: handle with set_string/set_int/set_double/set_null(position, ...)
      (see ``app.core.destination.PreparedStatement``).
    - placeholders: as returned by ``compile_template``.
    - params: submitted values keyed by placeholder name. A missing key is an
      error; a None value is bound as NULL.
    - template: original template, only used in error messages.

    Returns *statement*. Raises MissingParameterError, UnsupportedTypeError or
    ParameterCoercionError before any slot is written.
    """
    log = logger or _log
    _params = params or {}

    resolved: list[tuple[CoercionRule, Any]] = []
    for ph in placeholders:
        if ph.name not in _params:
            raise MissingParameterError(ph.name, template)
        resolved.append(coerce_value(ph, _params[ph.name], template))

    for position, (rule, value) in enumerate(resolved, start=1):
        if value is None:
            statement.set_null(position)
        else:
            getattr(statement, _SETTERS[rule])(position, value)

    log.debug(
        "bound %d parameter(s): %s",
        len(resolved),
        ", ".join(f"{ph.name}:{rule.value}" for ph, (rule, _) in zip(placeholders, resolved)),
    )
    return statement
