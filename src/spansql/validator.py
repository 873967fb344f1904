"""Post-translation SQL validation using sqlglot."""

from __future__ import annotations

import re

import sqlglot
from sqlglot.errors import SqlglotError

# Map dialect names to sqlglot dialect identifiers.
# Spanner speaks GoogleSQL, which sqlglot parses as BigQuery.
_DIALECT_MAP: dict[str, str] = {
    "postgres": "postgres",
    "spanner": "bigquery",
}

# Spanner statement forms BigQuery lacks, rewritten to the nearest form sqlglot parses.
# Only the statement shape is checked, so the upsert verb can be dropped.
_REWRITES: dict[str, list[tuple[re.Pattern[str], str]]] = {
    "spanner": [
        (re.compile(r"^\s*insert\s+or\s+(?:update|ignore)\s+into\b", re.IGNORECASE), "insert into"),
    ],
}


def _normalize(sql: str, dialect_name: str) -> str:
    for pattern, replacement in _REWRITES.get(dialect_name, []):
        sql = pattern.sub(replacement, sql)
    return sql


def validate_sql(sql: str, dialect_name: str) -> list[str]:
    """Parse SQL with sqlglot for the given dialect.

    Returns a list of error messages (empty if valid).
    Validation is non-blocking — callers should treat errors as warnings.
    """
    sg_dialect = _DIALECT_MAP.get(dialect_name)
    if sg_dialect is None:
        return [f"Unknown dialect '{dialect_name}' — skipping SQL validation"]

    try:
        sqlglot.parse(_normalize(sql, dialect_name), read=sg_dialect)
    except SqlglotError as exc:
        return [str(exc)]
    return []
