"""Shared test fixtures for spansql."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from spansql.ast.nodes import SelectStatement, Statement
from spansql.dialect import DialectRegistry
from spansql.dialect.base import Dialect
from spansql.dialect.postgres import PostgresDialect
from spansql.dialect.spanner import SpannerDialect
from spansql.settings import Settings


@pytest.fixture
def spanner() -> SpannerDialect:
    return DialectRegistry.get("spanner")


@pytest.fixture
def postgres() -> PostgresDialect:
    return DialectRegistry.get("postgres")


def _render(dialect: Dialect, node: object) -> str:
    statement = node if isinstance(node, Statement) else SelectStatement(query=node)
    return dialect.translate(statement).sql


@pytest.fixture
def spanner_sql(spanner: SpannerDialect) -> Callable[[object], str]:
    """Render a statement (or a bare query part) with the Spanner dialect."""
    return lambda node: _render(spanner, node)


@pytest.fixture
def postgres_sql(postgres: PostgresDialect) -> Callable[[object], str]:
    """Render a statement (or a bare query part) with the PostgreSQL dialect."""
    return lambda node: _render(postgres, node)


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the environment and any .env file."""
    return Settings(_env_file=None)
