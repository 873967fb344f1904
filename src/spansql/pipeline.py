"""Orchestrates a translation: Statement → dialect SQL → validation → bind values."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import sqlparse

from spansql.ast.nodes import Parameter, Statement
from spansql.binding import bind_parameters
from spansql.dialect.registry import DialectRegistry
from spansql.errors import TranslationError
from spansql.settings import Settings
from spansql.temptable.models import TemporaryTable
from spansql.validator import validate_sql

logger = logging.getLogger("spansql.pipeline")


@dataclass
class CompilationResult:
    """The result of translating a statement to SQL."""

    sql: str
    dialect: str
    parameters: list[Parameter] = field(default_factory=list)
    bind_values: list[object] = field(default_factory=list)
    follow_on_locking: bool = False
    warnings: list[str] = field(default_factory=list)
    sql_valid: bool = True


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper())


def _format_sql(sql: str) -> str:
    """Pretty-print SQL with keyword-per-line formatting."""
    return sqlparse.format(sql, reindent=True, indent_width=2, wrap_after=80)


class TranslationPipeline:
    """Orchestrates: Statement → SQL rendering → validation → parameter binding."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or Settings()

    def translate(self, statement: Statement, dialect_name: str | None = None) -> CompilationResult:
        """Translate ``statement`` for the named (or configured default) dialect."""
        name = dialect_name or self._settings.default_dialect
        dialect = DialectRegistry.get(name)

        try:
            result = dialect.translate(statement)
        except TranslationError as exc:
            logger.warning("Translation to %s failed: %s", name, exc)
            raise

        # SQL validation (non-blocking)
        warnings: list[str] = []
        if self._settings.validate_sql:
            warnings = [f"SQL validation: {e}" for e in validate_sql(result.sql, name)]
            for warning in warnings:
                logger.info("%s", warning)

        sql = _format_sql(result.sql) if self._settings.pretty_sql else result.sql
        return CompilationResult(
            sql=sql,
            dialect=name,
            parameters=result.parameters,
            bind_values=bind_parameters(result.parameters, dialect),
            follow_on_locking=result.follow_on_locking,
            warnings=warnings,
            sql_valid=not warnings,
        )

    def create_temporary_table(self, table: TemporaryTable, dialect_name: str | None = None) -> str:
        """Return the CREATE statement for ``table`` in the named dialect."""
        dialect = DialectRegistry.get(dialect_name or self._settings.default_dialect)
        return dialect.temporary_table_exporter().sql_create_command(table)
