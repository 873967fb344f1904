"""How a dialect wants its temporary tables declared."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from spansql.types import SqlTypes


@dataclass(frozen=True)
class TemporaryTableStrategy:
    """Per-dialect switches for temporary-table DDL."""

    column_annotations: Mapping[SqlTypes, str] = field(default_factory=dict)
    supports_null_constraint: bool = True
    supports_primary_key: bool = True

    def column_annotation(self, type_code: SqlTypes) -> str:
        """Extra text appended after a column's type, empty when none."""
        return self.column_annotations.get(type_code, "")
