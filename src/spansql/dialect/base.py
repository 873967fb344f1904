"""Abstract base dialect with capability flags and rendering configuration."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from spansql.ast.nodes import SetOperator, Statement
from spansql.binding import ArrayValueAdapter
from spansql.errors import UnsupportedOperationError
from spansql.types import SqlTypes

if TYPE_CHECKING:
    from spansql.temptable.exporter import TemporaryTableExporter
    from spansql.temptable.strategy import TemporaryTableStrategy
    from spansql.translator.base import SqlAstTranslator, TranslationResult


@dataclass(frozen=True)
class DialectCapabilities:
    """Flags indicating what SQL features a dialect supports."""

    supports_row_locking: bool = True
    supports_lateral: bool = True
    supports_ilike: bool = False
    supports_like_escape: bool = True
    supports_row_value_comparison: bool = True
    supports_integer_division: bool = True


class Dialect(ABC):
    """Abstract base for all SQL dialects.

    A dialect is immutable configuration shared by every translation. The
    stateful rendering lives in the translator returned by
    :meth:`create_translator`, one instance per statement.
    """

    _TYPE_NAMES: dict[SqlTypes, str] = {}

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def capabilities(self) -> DialectCapabilities: ...

    @abstractmethod
    def create_translator(self, statement: Statement) -> SqlAstTranslator:
        """Return a fresh translator for ``statement``."""

    def translate(self, statement: Statement) -> TranslationResult:
        """Render a complete statement to dialect-specific SQL."""
        return self.create_translator(statement).translate()

    @property
    def follow_on_locking(self) -> bool:
        """Whether locks should be acquired by follow-up statements when allowed."""
        return False

    @property
    def lower_function(self) -> str:
        return "lower"

    def escape_literal(self, value: str) -> str:
        """Escape the body of a string literal (without the enclosing quotes)."""
        return value.replace("'", "''")

    def set_operator_sql(self, operator: SetOperator) -> str:
        return operator.value

    def type_name(self, type_code: SqlTypes) -> str:
        """Return the column type name used in DDL for ``type_code``."""
        try:
            return self._TYPE_NAMES[type_code]
        except KeyError:
            raise UnsupportedOperationError(
                f"Dialect '{self.name}' has no column type for {type_code.name}"
            ) from None

    def null_column_string(self, type_name: str) -> str:
        """Marker appended to nullable column definitions."""
        return ""

    @property
    def create_table_string(self) -> str:
        return "create table"

    @property
    def temporary_table_strategy(self) -> TemporaryTableStrategy | None:
        return None

    def temporary_table_exporter(self) -> TemporaryTableExporter:
        from spansql.temptable.exporter import TemporaryTableExporter

        return TemporaryTableExporter(self)

    @property
    def array_value_adapter(self) -> ArrayValueAdapter:
        return ArrayValueAdapter()
