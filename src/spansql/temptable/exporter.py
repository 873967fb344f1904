"""CREATE / DROP / truncate statements for temporary tables."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from spansql.errors import ConfigurationError
from spansql.temptable.models import TemporaryTable, TemporaryTableColumn
from spansql.temptable.strategy import TemporaryTableStrategy

if TYPE_CHECKING:
    from spansql.dialect.base import Dialect

logger = logging.getLogger("spansql.temptable")


class TemporaryTableExporter:
    """Renders temporary-table DDL with the primary key as a table constraint."""

    def __init__(self, dialect: Dialect) -> None:
        self._dialect = dialect

    def _strategy(self) -> TemporaryTableStrategy:
        strategy = self._dialect.temporary_table_strategy
        if strategy is None:
            raise ConfigurationError(
                f"Dialect '{self._dialect.name}' has no temporary table strategy"
            )
        return strategy

    def _column_definition(
        self, column: TemporaryTableColumn, strategy: TemporaryTableStrategy
    ) -> str:
        type_name = column.sql_type_definition or self._dialect.type_name(column.type_code)
        parts = [column.name, " ", type_name]
        annotation = strategy.column_annotation(column.type_code)
        if annotation:
            parts += [" ", annotation]
        if strategy.supports_null_constraint:
            if column.nullable:
                null_string = self._dialect.null_column_string(type_name)
                if null_string not in type_name:
                    parts.append(null_string)
            else:
                parts.append(" not null")
        return "".join(parts)

    def _create_prefix(self, table: TemporaryTable, strategy: TemporaryTableStrategy) -> str:
        columns = ", ".join(self._column_definition(c, strategy) for c in table.columns)
        return f"{self._dialect.create_table_string} {table.qualified_name}({columns}"

    def sql_create_command(self, table: TemporaryTable) -> str:
        strategy = self._strategy()
        sql = self._create_prefix(table, strategy)
        keys = table.primary_key_columns
        if strategy.supports_primary_key and keys:
            sql += f", primary key ({', '.join(c.name for c in keys)})"
        sql += ")"
        logger.debug("Temporary table DDL for %s: %s", self._dialect.name, sql)
        return sql

    def sql_drop_command(self, table: TemporaryTable) -> str:
        return f"drop table {table.qualified_name}"

    def sql_truncate_command(self, table: TemporaryTable) -> str:
        return f"delete from {table.qualified_name}"


class SpannerTemporaryTableExporter(TemporaryTableExporter):
    """Spanner declares the primary key after the column list, outside the parentheses."""

    def sql_create_command(self, table: TemporaryTable) -> str:
        strategy = self._strategy()
        sql = self._create_prefix(table, strategy) + ")"
        keys = table.primary_key_columns
        if strategy.supports_primary_key and keys:
            sql += f" primary key ({', '.join(c.name for c in keys)})"
        logger.debug("Temporary table DDL for %s: %s", self._dialect.name, sql)
        return sql

    def sql_truncate_command(self, table: TemporaryTable) -> str:
        # Spanner rejects DELETE without a WHERE clause.
        return f"delete from {table.qualified_name} where true"
