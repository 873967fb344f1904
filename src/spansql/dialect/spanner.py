"""Cloud Spanner (GoogleSQL) dialect implementation."""

from __future__ import annotations

from spansql.ast.nodes import SetOperator, Statement
from spansql.binding import ArrayValueAdapter, SpannerArrayValueAdapter
from spansql.dialect.base import Dialect, DialectCapabilities
from spansql.dialect.registry import DialectRegistry
from spansql.temptable.exporter import SpannerTemporaryTableExporter, TemporaryTableExporter
from spansql.temptable.strategy import TemporaryTableStrategy
from spansql.translator.base import SqlAstTranslator
from spansql.translator.spanner import SpannerSqlAstTranslator
from spansql.types import SqlTypes

# GoogleSQL only accepts the explicit DISTINCT form of these set operators.
_SET_OPERATORS: dict[SetOperator, str] = {
    SetOperator.UNION: "union distinct",
    SetOperator.INTERSECT: "intersect distinct",
    SetOperator.EXCEPT: "except distinct",
}


@DialectRegistry.register
class SpannerDialect(Dialect):
    """Cloud Spanner dialect — no row locks, LATERAL, ILIKE, ESCAPE or row values."""

    _TYPE_NAMES = {
        SqlTypes.BIT: "BOOL",
        SqlTypes.BOOLEAN: "BOOL",
        SqlTypes.TINYINT: "INT64",
        SqlTypes.SMALLINT: "INT64",
        SqlTypes.INTEGER: "INT64",
        SqlTypes.BIGINT: "INT64",
        SqlTypes.FLOAT: "FLOAT64",
        SqlTypes.DOUBLE: "FLOAT64",
        SqlTypes.REAL: "FLOAT32",
        SqlTypes.NUMERIC: "NUMERIC",
        SqlTypes.DECIMAL: "NUMERIC",
        SqlTypes.CHAR: "STRING(1)",
        SqlTypes.VARCHAR: "STRING(MAX)",
        SqlTypes.LONGVARCHAR: "STRING(MAX)",
        SqlTypes.DATE: "DATE",
        SqlTypes.TIMESTAMP: "TIMESTAMP",
        SqlTypes.TIMESTAMP_WITH_TIMEZONE: "TIMESTAMP",
        SqlTypes.BINARY: "BYTES(MAX)",
        SqlTypes.VARBINARY: "BYTES(MAX)",
        SqlTypes.JSON: "JSON",
    }

    @property
    def name(self) -> str:
        return "spanner"

    @property
    def capabilities(self) -> DialectCapabilities:
        return DialectCapabilities(
            supports_row_locking=False,
            supports_lateral=False,
            supports_ilike=False,
            supports_like_escape=False,
            supports_row_value_comparison=False,
            supports_integer_division=False,
        )

    def escape_literal(self, value: str) -> str:
        """GoogleSQL: backslash-escape backslashes and single quotes."""
        return value.replace("\\", "\\\\").replace("'", "\\'")

    def set_operator_sql(self, operator: SetOperator) -> str:
        return _SET_OPERATORS.get(operator, operator.value)

    @property
    def temporary_table_strategy(self) -> TemporaryTableStrategy:
        return TemporaryTableStrategy()

    def temporary_table_exporter(self) -> TemporaryTableExporter:
        return SpannerTemporaryTableExporter(self)

    @property
    def array_value_adapter(self) -> ArrayValueAdapter:
        return SpannerArrayValueAdapter()

    def create_translator(self, statement: Statement) -> SqlAstTranslator:
        return SpannerSqlAstTranslator(self, statement)
