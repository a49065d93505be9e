"""Unit tests for parameter collection and normalization."""

from __future__ import annotations

from model_query.core.params import ParamBag, normalize_params


class TestNormalizeParams:
    def test_named_passthrough(self) -> None:
        sql = 'SELECT * FROM "books" WHERE "id" = :p1'
        assert normalize_params(sql, "named") == sql

    def test_pyformat_conversion(self) -> None:
        sql = 'SELECT * FROM "books" WHERE "id" = :p1'
        expected = 'SELECT * FROM "books" WHERE "id" = %(p1)s'
        assert normalize_params(sql, "pyformat") == expected

    def test_multiple_params(self) -> None:
        sql = "SELECT * FROM t WHERE a IN (:p1, :p2) AND b = :p3"
        expected = "SELECT * FROM t WHERE a IN (%(p1)s, %(p2)s) AND b = %(p3)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_typecast_exclusion(self) -> None:
        sql = "SELECT value::integer FROM t WHERE id = :p1"
        expected = "SELECT value::integer FROM t WHERE id = %(p1)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_string_literal_exclusion(self) -> None:
        sql = "SELECT * FROM t WHERE col = ':not_a_param' AND id = :p1"
        expected = "SELECT * FROM t WHERE col = ':not_a_param' AND id = %(p1)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_no_params(self) -> None:
        sql = "SELECT 1"
        assert normalize_params(sql, "pyformat") == sql


class TestParamBag:
    def test_bind_returns_sequential_placeholders(self) -> None:
        bag = ParamBag()
        assert bag.bind("a") == ":p1"
        assert bag.bind("b") == ":p2"
        assert bag.values == {"p1": "a", "p2": "b"}
        assert len(bag) == 2

    def test_same_value_bound_twice_gets_two_names(self) -> None:
        bag = ParamBag()
        bag.bind(1)
        bag.bind(1)
        assert bag.values == {"p1": 1, "p2": 1}

    def test_values_is_a_copy(self) -> None:
        bag = ParamBag()
        bag.bind(1)
        bag.values["p9"] = 9
        assert "p9" not in bag.values
