"""Tests for the SQL dialect system."""

from __future__ import annotations

import pytest

from spansql.ast.nodes import SelectStatement, SetOperator
from spansql.ast.builder import QueryBuilder, col
from spansql.binding import SpannerArrayValueAdapter
from spansql.dialect import DialectRegistry
from spansql.dialect.postgres import PostgresDialect
from spansql.dialect.registry import UnsupportedDialectError
from spansql.dialect.spanner import SpannerDialect
from spansql.errors import UnsupportedOperationError
from spansql.translator.base import SqlAstTranslator
from spansql.translator.spanner import SpannerSqlAstTranslator
from spansql.types import SqlTypes


class TestDialectRegistry:
    def test_available_dialects(self) -> None:
        available = DialectRegistry.available()
        assert "postgres" in available
        assert "spanner" in available

    def test_get_spanner(self) -> None:
        assert isinstance(DialectRegistry.get("spanner"), SpannerDialect)

    def test_get_postgres(self) -> None:
        assert isinstance(DialectRegistry.get("postgres"), PostgresDialect)

    def test_unsupported_dialect_error(self) -> None:
        with pytest.raises(UnsupportedDialectError) as exc_info:
            DialectRegistry.get("oracle")
        assert "oracle" in str(exc_info.value)
        assert "spanner" in str(exc_info.value)


class TestSpannerDialect:
    @pytest.fixture
    def dialect(self) -> SpannerDialect:
        return SpannerDialect()

    def test_capabilities(self, dialect: SpannerDialect) -> None:
        caps = dialect.capabilities
        assert caps.supports_row_locking is False
        assert caps.supports_lateral is False
        assert caps.supports_ilike is False
        assert caps.supports_like_escape is False
        assert caps.supports_row_value_comparison is False
        assert caps.supports_integer_division is False

    def test_escape_literal(self, dialect: SpannerDialect) -> None:
        assert dialect.escape_literal("a'b\\c") == "a\\'b\\\\c"

    def test_set_operators(self, dialect: SpannerDialect) -> None:
        assert dialect.set_operator_sql(SetOperator.UNION) == "union distinct"
        assert dialect.set_operator_sql(SetOperator.EXCEPT) == "except distinct"
        assert dialect.set_operator_sql(SetOperator.UNION_ALL) == "union all"

    def test_type_names(self, dialect: SpannerDialect) -> None:
        assert dialect.type_name(SqlTypes.SMALLINT) == "INT64"
        assert dialect.type_name(SqlTypes.VARCHAR) == "STRING(MAX)"
        with pytest.raises(UnsupportedOperationError):
            dialect.type_name(SqlTypes.ARRAY)

    def test_array_value_adapter(self, dialect: SpannerDialect) -> None:
        assert isinstance(dialect.array_value_adapter, SpannerArrayValueAdapter)

    def test_fresh_translator_per_statement(self, dialect: SpannerDialect) -> None:
        stmt = SelectStatement(QueryBuilder().select(col("a")).from_("t").build())
        first = dialect.create_translator(stmt)
        assert isinstance(first, SpannerSqlAstTranslator)
        assert first is not dialect.create_translator(stmt)

    def test_dialect_is_reusable(self, dialect: SpannerDialect) -> None:
        stmt = SelectStatement(QueryBuilder().select(col("a")).from_("t").build())
        assert dialect.translate(stmt).sql == dialect.translate(stmt).sql == "select a from t"


class TestPostgresDialect:
    @pytest.fixture
    def dialect(self) -> PostgresDialect:
        return PostgresDialect()

    def test_capabilities(self, dialect: PostgresDialect) -> None:
        caps = dialect.capabilities
        assert caps.supports_ilike is True
        assert caps.supports_row_locking is True
        assert caps.supports_row_value_comparison is True

    def test_uses_standard_translator(self, dialect: PostgresDialect) -> None:
        stmt = SelectStatement(QueryBuilder().build())
        assert type(dialect.create_translator(stmt)) is SqlAstTranslator

    def test_escape_literal(self, dialect: PostgresDialect) -> None:
        assert dialect.escape_literal("it's") == "it''s"

    def test_type_names(self, dialect: PostgresDialect) -> None:
        assert dialect.type_name(SqlTypes.BIGINT) == "bigint"
        assert dialect.type_name(SqlTypes.JSON) == "jsonb"
