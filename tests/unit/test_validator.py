"""Tests for SQL validation using sqlglot."""

from __future__ import annotations

import pytest

from spansql.validator import validate_sql


@pytest.mark.parametrize("dialect", ["postgres", "spanner"])
def test_valid_sql_all_dialects(dialect: str) -> None:
    assert validate_sql("SELECT 1", dialect) == []


def test_invalid_sql_returns_errors() -> None:
    assert len(validate_sql("SELECT FROM WHERE", "postgres")) > 0


def test_spanner_maps_to_bigquery() -> None:
    assert validate_sql("select * from t where x in unnest([1, 2])", "spanner") == []


def test_unknown_dialect_is_a_warning() -> None:
    errors = validate_sql("SELECT 1", "oracle")
    assert len(errors) == 1
    assert "oracle" in errors[0]


@pytest.mark.parametrize(
    "sql",
    [
        "insert or update into t (a, b) values (1, 2)",
        "insert or ignore into t (a) select a from s",
        "select * from t, unnest(array(select as struct b from s where s.k = t.k)) d",
        "delete from t where true",
    ],
)
def test_spanner_output_forms_are_valid(sql: str) -> None:
    assert validate_sql(sql, "spanner") == []

