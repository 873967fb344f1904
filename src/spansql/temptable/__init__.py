"""DDL for the scratch tables used by multi-table bulk operations."""

from spansql.temptable.exporter import SpannerTemporaryTableExporter, TemporaryTableExporter
from spansql.temptable.models import TemporaryTable, TemporaryTableColumn
from spansql.temptable.strategy import TemporaryTableStrategy

__all__ = [
    "SpannerTemporaryTableExporter",
    "TemporaryTable",
    "TemporaryTableColumn",
    "TemporaryTableExporter",
    "TemporaryTableStrategy",
]
