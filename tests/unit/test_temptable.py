"""Tests for temporary-table DDL generation."""

from __future__ import annotations

import pydantic
import pytest

from spansql.dialect.postgres import PostgresDialect
from spansql.errors import ConfigurationError, UnsupportedOperationError
from spansql.temptable import (
    SpannerTemporaryTableExporter,
    TemporaryTable,
    TemporaryTableColumn,
    TemporaryTableExporter,
    TemporaryTableStrategy,
)
from spansql.types import SqlTypes


def _table(*columns: TemporaryTableColumn) -> TemporaryTable:
    return TemporaryTable(name="ht_person", columns=list(columns))


class _NoStrategyDialect(PostgresDialect):
    @property
    def name(self) -> str:
        return "nostrategy"

    @property
    def temporary_table_strategy(self) -> None:
        return None


class _AnnotatingDialect(PostgresDialect):
    @property
    def temporary_table_strategy(self) -> TemporaryTableStrategy:
        return TemporaryTableStrategy(
            column_annotations={SqlTypes.VARCHAR: "collate \"C\""},
            supports_null_constraint=False,
            supports_primary_key=False,
        )

    def null_column_string(self, type_name: str) -> str:
        return " null"


class TestTemporaryTableModels:
    def test_qualified_name(self) -> None:
        table = TemporaryTable(name="t", schema_name="s", catalog="c")
        assert table.qualified_name == "c.s.t"
        assert TemporaryTable(name="t").qualified_name == "t"

    def test_duplicate_column_names_rejected(self) -> None:
        column = TemporaryTableColumn(name="id", type_code=SqlTypes.BIGINT)
        with pytest.raises(pydantic.ValidationError):
            _table(column, column)

    def test_type_code_is_coerced(self) -> None:
        column = TemporaryTableColumn(name="id", type_code=-5)
        assert column.type_code is SqlTypes.BIGINT


class TestSpannerExporter:
    def test_primary_key_outside_parentheses(self, spanner) -> None:
        table = _table(
            TemporaryTableColumn(name="id", type_code=SqlTypes.BIGINT, nullable=False, primary_key=True),
            TemporaryTableColumn(name="name", type_code=SqlTypes.VARCHAR),
        )
        exporter = spanner.temporary_table_exporter()
        assert isinstance(exporter, SpannerTemporaryTableExporter)
        assert exporter.sql_create_command(table) == (
            "create table ht_person(id INT64 not null, name STRING(MAX)) primary key (id)"
        )

    def test_composite_primary_key_in_declaration_order(self, spanner) -> None:
        table = _table(
            TemporaryTableColumn(name="b", type_code=SqlTypes.INTEGER, nullable=False, primary_key=True),
            TemporaryTableColumn(name="v", type_code=SqlTypes.BOOLEAN),
            TemporaryTableColumn(name="a", type_code=SqlTypes.INTEGER, nullable=False, primary_key=True),
        )
        assert spanner.temporary_table_exporter().sql_create_command(table) == (
            "create table ht_person(b INT64 not null, v BOOL, a INT64 not null) primary key (b, a)"
        )

    def test_no_primary_key_columns(self, spanner) -> None:
        table = _table(TemporaryTableColumn(name="v", type_code=SqlTypes.DATE))
        assert spanner.temporary_table_exporter().sql_create_command(table) == (
            "create table ht_person(v DATE)"
        )

    def test_explicit_type_definition(self, spanner) -> None:
        table = _table(
            TemporaryTableColumn(name="v", type_code=SqlTypes.VARCHAR, sql_type_definition="STRING(64)")
        )
        assert spanner.temporary_table_exporter().sql_create_command(table) == (
            "create table ht_person(v STRING(64))"
        )

    def test_truncate_has_where(self, spanner) -> None:
        assert spanner.temporary_table_exporter().sql_truncate_command(_table()) == (
            "delete from ht_person where true"
        )

    def test_drop(self, spanner) -> None:
        assert spanner.temporary_table_exporter().sql_drop_command(_table()) == "drop table ht_person"

    def test_unsupported_column_type(self, spanner) -> None:
        table = _table(TemporaryTableColumn(name="t", type_code=SqlTypes.TIME))
        with pytest.raises(UnsupportedOperationError):
            spanner.temporary_table_exporter().sql_create_command(table)

    def test_missing_strategy(self) -> None:
        exporter = SpannerTemporaryTableExporter(_NoStrategyDialect())
        with pytest.raises(ConfigurationError, match="nostrategy"):
            exporter.sql_create_command(_table())


class TestStandardExporter:
    def test_primary_key_inside_parentheses(self, postgres) -> None:
        table = _table(
            TemporaryTableColumn(name="id", type_code=SqlTypes.BIGINT, nullable=False, primary_key=True),
            TemporaryTableColumn(name="name", type_code=SqlTypes.VARCHAR),
        )
        exporter = postgres.temporary_table_exporter()
        assert type(exporter) is TemporaryTableExporter
        assert exporter.sql_create_command(table) == (
            "create temporary table ht_person(id bigint not null, name varchar(255), primary key (id))"
        )

    def test_truncate(self, postgres) -> None:
        assert postgres.temporary_table_exporter().sql_truncate_command(_table()) == (
            "delete from ht_person"
        )

    def test_annotations_without_constraints(self) -> None:
        table = _table(
            TemporaryTableColumn(name="id", type_code=SqlTypes.BIGINT, nullable=False, primary_key=True),
            TemporaryTableColumn(name="name", type_code=SqlTypes.VARCHAR),
        )
        exporter = TemporaryTableExporter(_AnnotatingDialect())
        assert exporter.sql_create_command(table) == (
            "create temporary table ht_person(id bigint, name varchar(255) collate \"C\")"
        )

    def test_missing_strategy(self) -> None:
        with pytest.raises(ConfigurationError):
            TemporaryTableExporter(_NoStrategyDialect()).sql_create_command(_table())

    def test_nullable_column_string(self) -> None:
        class _NullStringDialect(PostgresDialect):
            def null_column_string(self, type_name: str) -> str:
                return " null"

        table = _table(TemporaryTableColumn(name="v", type_code=SqlTypes.INTEGER))
        assert TemporaryTableExporter(_NullStringDialect()).sql_create_command(table) == (
            "create temporary table ht_person(v integer null)"
        )
