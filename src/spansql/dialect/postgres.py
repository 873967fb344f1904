"""PostgreSQL dialect implementation."""

from __future__ import annotations

from spansql.ast.nodes import Statement
from spansql.dialect.base import Dialect, DialectCapabilities
from spansql.dialect.registry import DialectRegistry
from spansql.temptable.strategy import TemporaryTableStrategy
from spansql.translator.base import SqlAstTranslator
from spansql.types import SqlTypes


@DialectRegistry.register
class PostgresDialect(Dialect):
    """PostgreSQL dialect — renders the standard syntax unchanged, plus ILIKE."""

    _TYPE_NAMES = {
        SqlTypes.BIT: "boolean",
        SqlTypes.BOOLEAN: "boolean",
        SqlTypes.TINYINT: "smallint",
        SqlTypes.SMALLINT: "smallint",
        SqlTypes.INTEGER: "integer",
        SqlTypes.BIGINT: "bigint",
        SqlTypes.FLOAT: "float8",
        SqlTypes.DOUBLE: "float8",
        SqlTypes.REAL: "real",
        SqlTypes.NUMERIC: "numeric",
        SqlTypes.DECIMAL: "numeric",
        SqlTypes.CHAR: "char(1)",
        SqlTypes.VARCHAR: "varchar(255)",
        SqlTypes.LONGVARCHAR: "text",
        SqlTypes.DATE: "date",
        SqlTypes.TIME: "time",
        SqlTypes.TIMESTAMP: "timestamp",
        SqlTypes.TIMESTAMP_WITH_TIMEZONE: "timestamp with time zone",
        SqlTypes.BINARY: "bytea",
        SqlTypes.VARBINARY: "bytea",
        SqlTypes.JSON: "jsonb",
    }

    @property
    def name(self) -> str:
        return "postgres"

    @property
    def capabilities(self) -> DialectCapabilities:
        return DialectCapabilities(supports_ilike=True)

    @property
    def create_table_string(self) -> str:
        return "create temporary table"

    @property
    def temporary_table_strategy(self) -> TemporaryTableStrategy:
        return TemporaryTableStrategy()

    def create_translator(self, statement: Statement) -> SqlAstTranslator:
        return SqlAstTranslator(self, statement)
