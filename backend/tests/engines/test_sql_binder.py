"""Unit tests for engines.sql.binder (type coercion and positional binding)."""

from unittest.mock import MagicMock, call

import pytest

from app.core.destination import PreparedStatement
from app.core.errors import (
    MissingParameterError,
    ParameterCoercionError,
    StatementBindError,
    UnsupportedTypeError,
)
from app.engines.sql import CoercionRule, Placeholder, bind, compile_template
from app.engines.sql.binder import TYPE_TOKENS, parse_int


def _stmt(template: str) -> tuple[PreparedStatement, tuple[Placeholder, ...]]:
    compiled = compile_template(template)
    return PreparedStatement(MagicMock(), compiled.query, compiled.arity), compiled.placeholders


class TestBindTypes:
    def test_string(self):
        stmt, phs = _stmt("{name}")
        bind(stmt, phs, {"name": "Ann"})
        assert stmt.parameters == ("Ann",)

    def test_string_from_number(self):
        stmt, phs = _stmt("{name:string}")
        bind(stmt, phs, {"name": 12})
        assert stmt.parameters == ("12",)

    def test_string_from_bool(self):
        stmt, phs = _stmt("{flag:string}")
        bind(stmt, phs, {"flag": True})
        assert stmt.parameters == ("true",)

    @pytest.mark.parametrize("token", ["number", "int", "integer"])
    def test_integer_aliases(self, token):
        stmt, phs = _stmt("{n:%s}" % token)
        bind(stmt, phs, {"n": "42"})
        assert stmt.parameters == (42,)
        assert isinstance(stmt.parameters[0], int)

    @pytest.mark.parametrize(
        "raw, expected",
        [(7, 7), (-3, -3), (4.9, 4), (-4.9, -4), ("  12abc", 12), ("+5", 5), ("-0", 0)],
    )
    def test_integer_lenient_parse(self, raw, expected):
        stmt, phs = _stmt("{n:int}")
        bind(stmt, phs, {"n": raw})
        assert stmt.parameters == (expected,)

    def test_long_bound_as_double(self):
        stmt = MagicMock()
        bind(stmt, [Placeholder("id", "long")], {"id": "42"})
        stmt.set_double.assert_called_once_with(1, 42.0)
        stmt.set_int.assert_not_called()

    def test_long_precision_ceiling(self):
        stmt, phs = _stmt("{id:long}")
        bind(stmt, phs, {"id": 9007199254740993})
        assert stmt.parameters == (9007199254740992.0,)

    @pytest.mark.parametrize(
        "raw, expected",
        [(True, 1), (False, 0), ("yes", 1), ("", 0), (0, 0), (2, 1), ("false", 1)],
    )
    def test_boolean_truthiness(self, raw, expected):
        stmt, phs = _stmt("{done:boolean}")
        bind(stmt, phs, {"done": raw})
        assert stmt.parameters == (expected,)

    def test_none_binds_null(self):
        stmt = MagicMock()
        bind(stmt, [Placeholder("n", "int")], {"n": None})
        stmt.set_null.assert_called_once_with(1)


class TestBindPositions:
    def test_positions_start_at_one(self):
        stmt = MagicMock()
        phs = compile_template("{a},{b:int},{c:long},{d:boolean}").placeholders
        bind(stmt, phs, {"a": "x", "b": "2", "c": 3, "d": True})
        assert stmt.mock_calls == [
            call.set_string(1, "x"),
            call.set_int(2, 2),
            call.set_double(3, 3.0),
            call.set_int(4, 1),
        ]

    def test_duplicate_name_binds_each_slot(self):
        stmt, phs = _stmt("{a},{b:number},{a}")
        bind(stmt, phs, {"a": "x", "b": 1})
        assert stmt.parameters == ("x", 1, "x")

    def test_zero_arity(self):
        stmt, phs = _stmt("SELECT 1")
        assert bind(stmt, phs, {}) is stmt
        assert stmt.parameters == ()

    def test_returns_statement(self):
        stmt, phs = _stmt("{a}")
        assert bind(stmt, phs, {"a": 1}) is stmt


class TestBindErrors:
    def test_missing_parameter(self):
        stmt, phs = _stmt("{a},{b}")
        with pytest.raises(MissingParameterError) as ei:
            bind(stmt, phs, {"a": "x"}, template="{a},{b}")
        assert ei.value.name == "b"
        assert str(ei.value) == "Parameter b is not supplied. SQL template: {a},{b}."

    def test_falsy_value_is_not_missing(self):
        stmt, phs = _stmt("{a:int},{b},{c:boolean}")
        bind(stmt, phs, {"a": 0, "b": "", "c": False})
        assert stmt.parameters == (0, "", 0)

    def test_missing_leaves_no_partial_bind(self):
        stmt, phs = _stmt("{a},{b:int},{c}")
        with pytest.raises(MissingParameterError):
            bind(stmt, phs, {"a": "x", "b": 1})
        assert not stmt.is_bound
        assert stmt.parameters == (None, None, None)

    def test_missing_with_none_params(self):
        stmt, phs = _stmt("{a}")
        with pytest.raises(MissingParameterError):
            bind(stmt, phs, None)

    def test_unsupported_type(self):
        stmt = MagicMock()
        with pytest.raises(UnsupportedTypeError) as ei:
            bind(stmt, [Placeholder("a"), Placeholder("x", "uuid")], {"a": 1, "x": "u"}, template="T")
        assert ei.value.type == "uuid"
        assert "unexpected type (uuid)" in str(ei.value)
        assert stmt.mock_calls == []

    def test_type_tokens_case_sensitive(self):
        stmt, phs = _stmt("{a:String}")
        with pytest.raises(UnsupportedTypeError):
            bind(stmt, phs, {"a": "x"})

    @pytest.mark.parametrize("raw", ["abc", "", True, float("nan"), [1], "9" * 5000])
    def test_unparseable_integer(self, raw):
        stmt, phs = _stmt("{a},{n:int}")
        with pytest.raises(ParameterCoercionError) as ei:
            bind(stmt, phs, {"a": "x", "n": raw})
        assert isinstance(ei.value, StatementBindError)
        assert stmt.parameters == (None, None)

    def test_long_beyond_double_range(self):
        stmt, phs = _stmt("{id:long}")
        with pytest.raises(ParameterCoercionError):
            bind(stmt, phs, {"id": "1" * 400})
        assert stmt.parameters == (None,)


class TestCoercionRules:
    def test_every_token_maps_to_rule(self):
        assert set(TYPE_TOKENS.values()) == set(CoercionRule)
        assert TYPE_TOKENS["int"] is TYPE_TOKENS["number"] is CoercionRule.INTEGER

    def test_parse_int(self):
        assert parse_int("42") == 42
        assert parse_int(" -7 apples") == -7
        assert parse_int("x42") is None
        assert parse_int(False) is None
        assert parse_int(float("inf")) is None
