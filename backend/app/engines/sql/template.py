"""
Named-placeholder SQL templates.

A template embeds placeholders written as::

    {<name>[:<type>]}

e.g. ``SELECT NAME FROM PERSONS WHERE ID={id:string}``. ``name`` is
``[A-Za-z0-9_]+``, ``type`` is ``[A-Za-z]+`` and defaults to ``string``.
There is no escape for a literal ``{``; text that is not a well-formed
placeholder is copied as is.

``compile_template`` replaces every placeholder with one positional marker and
returns the placeholders in marker order. A name that appears twice yields two
placeholders (and two markers), each looked up separately at bind time.
Type tokens are not checked here; see ``app.engines.sql.binder``.
"""

import string
from dataclasses import dataclass

DEFAULT_TYPE = "string"

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_TYPE_CHARS = frozenset(string.ascii_letters)

# paramstyle -> positional marker (PEP 249 names)
_MARKERS = {
    "qmark": "?",
    "format": "%s",
}


@dataclass(frozen=True)
class Placeholder:
    name: str
    type: str = DEFAULT_TYPE


@dataclass(frozen=True)
class CompiledStatement:
    query: str
    placeholders: tuple[Placeholder, ...]

    @property
    def arity(self) -> int:
        return len(self.placeholders)


def _scan_run(template: str, pos: int, chars: frozenset[str]) -> int:
    """Return the index just past the run of *chars* starting at *pos*."""
    end = pos
    length = len(template)
    while end < length and template[end] in chars:
        end += 1
    return end


def _scan_placeholder(template: str, pos: int) -> tuple[Placeholder, int] | None:
    """
    Try to read a placeholder whose ``{`` is at *pos*.

    Returns (placeholder, index past ``}``) or None when the text at *pos* is
    not a well-formed placeholder.
    """
    name_end = _scan_run(template, pos + 1, _NAME_CHARS)
    if name_end == pos + 1 or name_end >= len(template):
        return None
    name = template[pos + 1 : name_end]

    if template[name_end] == "}":
        return Placeholder(name), name_end + 1

    if template[name_end] != ":":
        return None
    type_end = _scan_run(template, name_end + 1, _TYPE_CHARS)
    if type_end == name_end + 1 or type_end >= len(template):
        return None
    if template[type_end] != "}":
        return None
    return Placeholder(name, template[name_end + 1 : type_end]), type_end + 1


def _tokenize(template: str) -> list[str | Placeholder]:
    """Split *template* into literal text chunks and placeholders, in order."""
    tokens: list[str | Placeholder] = []
    literal: list[str] = []
    i = 0
    length = len(template)

    while i < length:
        ch = template[i]
        if ch == "{":
            scanned = _scan_placeholder(template, i)
            if scanned is not None:
                if literal:
                    tokens.append("".join(literal))
                    literal = []
                placeholder, i = scanned
                tokens.append(placeholder)
                continue
        literal.append(ch)
        i += 1

    if literal:
        tokens.append("".join(literal))
    return tokens


def compile_template(template: str, *, paramstyle: str = "qmark") -> CompiledStatement:
    """
    Compile *template* to a positional query for the given DB-API paramstyle.

    - ``qmark``: markers are ``?``, all other text is kept byte for byte.
    - ``format``: markers are ``%s`` and literal ``%`` is doubled, as
      pyformat/format drivers (psycopg, pymysql) expect.
    """
    marker = _MARKERS.get(paramstyle)
    if marker is None:
        raise ValueError(
            f"Unsupported paramstyle: {paramstyle!r} (expected one of {sorted(_MARKERS)})"
        )

    parts: list[str] = []
    placeholders: list[Placeholder] = []
    for token in _tokenize(template):
        if isinstance(token, Placeholder):
            placeholders.append(token)
            parts.append(marker)
        elif paramstyle == "format":
            parts.append(token.replace("%", "%%"))
        else:
            parts.append(token)

    return CompiledStatement(query="".join(parts), placeholders=tuple(placeholders))


def parse_placeholders(template: str) -> list[Placeholder]:
    """Placeholders of *template* in order of appearance (duplicates kept)."""
    return [t for t in _tokenize(template) if isinstance(t, Placeholder)]
