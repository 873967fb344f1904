"""Tests for AST nodes and the query builder."""

from __future__ import annotations

import dataclasses

import pytest

from spansql.ast.builder import QueryBuilder, and_, col, eq, func, lit, or_, param
from spansql.ast.nodes import (
    ColumnRef,
    Comparison,
    ComparisonOperator,
    JoinType,
    Junction,
    JunctionType,
    Literal,
    NamedTableReference,
    QueryPartTableReference,
)
from spansql.types import SqlTypes, is_integral


class TestNodes:
    def test_nodes_are_immutable(self) -> None:
        c = col("x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            c.name = "y"  # type: ignore[misc]

    def test_literal_constructors(self) -> None:
        assert Literal.integer(3).type_code is SqlTypes.INTEGER
        assert Literal.string("a").type_code is SqlTypes.VARCHAR
        assert Literal.null().value is None
        assert Literal.boolean(True).value is True

    def test_comparison_operator_negation(self) -> None:
        assert ComparisonOperator.LESS_THAN.negated is ComparisonOperator.GREATER_THAN_OR_EQUAL
        assert ComparisonOperator.DISTINCT_FROM.negated is ComparisonOperator.NOT_DISTINCT_FROM

    def test_strict_operator(self) -> None:
        assert ComparisonOperator.LESS_THAN_OR_EQUAL.strict is ComparisonOperator.LESS_THAN
        assert ComparisonOperator.GREATER_THAN.strict is ComparisonOperator.GREATER_THAN
        assert ComparisonOperator.EQUAL.is_ordering is False

    def test_integral_types(self) -> None:
        assert is_integral(SqlTypes.TINYINT)
        assert is_integral(SqlTypes.BIGINT)
        assert not is_integral(SqlTypes.NUMERIC)
        assert not is_integral(None)


class TestQueryBuilder:
    def test_simple_select(self) -> None:
        q = QueryBuilder().select(col("a"), col("b")).from_("t", alias="x").build()
        assert [s.expr for s in q.select_clause.selections] == [ColumnRef("a"), ColumnRef("b")]
        assert q.from_[0].primary == NamedTableReference("t", "x")

    def test_where_conditions_are_combined(self) -> None:
        q = (
            QueryBuilder()
            .select(col("a"))
            .from_("t")
            .where(eq(col("a"), lit(1)))
            .where(eq(col("b"), lit(2)))
            .build()
        )
        assert isinstance(q.where, Junction)
        assert q.where.type is JunctionType.CONJUNCTION
        assert len(q.where.predicates) == 2

    def test_join_requires_from(self) -> None:
        with pytest.raises(ValueError, match="from_"):
            QueryBuilder().join("s", on=eq(col("a"), col("b")))

    def test_join_appends_to_last_group(self) -> None:
        q = (
            QueryBuilder()
            .select(col("a"))
            .from_("t")
            .join("s", on=eq(col("a"), col("b")), join_type=JoinType.LEFT)
            .build()
        )
        assert q.from_[0].joins[0].join_type is JoinType.LEFT

    def test_from_subquery(self) -> None:
        inner = QueryBuilder().select(col("a")).from_("t").build()
        q = QueryBuilder().from_subquery(inner, "d", column_names=["c"], lateral=True).build()
        ref = q.from_[0].primary
        assert isinstance(ref, QueryPartTableReference)
        assert ref.lateral is True
        assert ref.column_names == ["c"]

    def test_offset_fetch_integers_become_literals(self) -> None:
        q = QueryBuilder().select(col("a")).from_("t").offset(5).fetch(10).build()
        assert q.offset == Literal.integer(5)
        assert q.fetch == Literal.integer(10)


class TestHelpers:
    def test_and_flattens(self) -> None:
        a, b, c = eq(col("a"), lit(1)), eq(col("b"), lit(2)), eq(col("c"), lit(3))
        combined = and_(and_(a, b), c)
        assert isinstance(combined, Junction)
        assert combined.predicates == [a, b, c]

    def test_and_single_and_empty(self) -> None:
        a = eq(col("a"), lit(1))
        assert and_(a) is a
        assert and_() == Literal.boolean(True)

    def test_or(self) -> None:
        a, b = eq(col("a"), lit(1)), eq(col("b"), lit(2))
        combined = or_(a, b)
        assert isinstance(combined, Junction)
        assert combined.type is JunctionType.DISJUNCTION
        assert or_() == Literal.boolean(False)

    def test_func_and_param(self) -> None:
        f = func("count", col("a"), distinct=True)
        assert f.distinct is True
        p = param([1, 2], SqlTypes.ARRAY, SqlTypes.INTEGER)
        assert p.element_type_code is SqlTypes.INTEGER

    def test_eq(self) -> None:
        c = eq(col("a"), lit(1))
        assert c == Comparison(ColumnRef("a"), ComparisonOperator.EQUAL, Literal(1))
