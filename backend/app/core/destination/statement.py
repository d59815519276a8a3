"""
Positional prepared statement over a DB-API connection.

DB-API drivers take the parameters together with the query at execute time,
so the handle keeps one slot per positional marker and hands the filled slots
to ``cursor.execute`` in ``execute_update``. Slots are 1-based.
"""

from typing import Any

from app.core.errors import StatementBindError

_UNSET = object()


class PreparedStatement:
    def __init__(self, conn: Any, query: str, arity: int) -> None:
        self._conn = conn
        self.query = query
        self._slots: list[Any] = [_UNSET] * arity
        self._cursor: Any = None

    @property
    def arity(self) -> int:
        return len(self._slots)

    @property
    def parameters(self) -> tuple[Any, ...]:
        """Bound values in position order (unset slots are reported as None)."""
        return tuple(None if v is _UNSET else v for v in self._slots)

    @property
    def is_bound(self) -> bool:
        return all(v is not _UNSET for v in self._slots)

    def _set(self, position: int, value: Any) -> None:
        if not 1 <= position <= len(self._slots):
            raise IndexError(
                f"Parameter index {position} out of range (1..{len(self._slots)})"
            )
        self._slots[position - 1] = value

    def set_string(self, position: int, value: str) -> None:
        self._set(position, str(value))

    def set_int(self, position: int, value: int) -> None:
        self._set(position, int(value))

    def set_double(self, position: int, value: float) -> None:
        self._set(position, float(value))

    def set_null(self, position: int) -> None:
        self._set(position, None)

    def clear_parameters(self) -> None:
        self._slots = [_UNSET] * len(self._slots)

    def execute_update(self) -> int:
        """Execute with the bound parameters and return the affected row count."""
        missing = [i + 1 for i, v in enumerate(self._slots) if v is _UNSET]
        if missing:
            raise StatementBindError(
                f"Parameters not bound at positions {missing}. Query: {self.query}"
            )
        if self._cursor is None:
            self._cursor = self._conn.cursor()
        # Params always passed: format-style drivers only unescape %% then.
        self._cursor.execute(self.query, tuple(self._slots))
        rowcount = self._cursor.rowcount
        return rowcount if rowcount is not None and rowcount >= 0 else 0

    def close(self) -> None:
        if self._cursor is not None:
            try:
                self._cursor.close()
            except Exception:
                pass
            self._cursor = None
