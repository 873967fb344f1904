"""Tests for array value adaptation and parameter binding."""

from __future__ import annotations

import pytest

from spansql.ast.builder import param
from spansql.binding import ArrayValueAdapter, SpannerArrayValueAdapter, bind_parameters
from spansql.types import SqlTypes


class TestSpannerArrayValueAdapter:
    @pytest.fixture
    def adapter(self) -> SpannerArrayValueAdapter:
        return SpannerArrayValueAdapter()

    @pytest.mark.parametrize("code", [SqlTypes.TINYINT, SqlTypes.SMALLINT, SqlTypes.INTEGER])
    def test_narrow_integers_are_widened(self, adapter, code) -> None:
        value = (1, -2, 3)
        adapted = adapter.adapt(value, code)
        assert adapted == [1, -2, 3]
        assert all(type(e) is int for e in adapted)

    def test_nulls_are_preserved_in_position(self, adapter) -> None:
        assert adapter.adapt([1, None, 3], SqlTypes.SMALLINT) == [1, None, 3]

    def test_empty_and_all_null_arrays(self, adapter) -> None:
        assert adapter.adapt([], SqlTypes.INTEGER) == []
        assert adapter.adapt([None, None], SqlTypes.TINYINT) == [None, None]

    def test_none_array(self, adapter) -> None:
        assert adapter.adapt(None, SqlTypes.INTEGER) is None

    @pytest.mark.parametrize("code", [SqlTypes.BIGINT, SqlTypes.VARCHAR, None])
    def test_other_element_types_pass_through(self, adapter, code) -> None:
        value = ["a", "b"] if code is SqlTypes.VARCHAR else [1, 2]
        assert adapter.adapt(value, code) is value

    def test_non_integer_elements_are_rejected(self, adapter) -> None:
        with pytest.raises(TypeError):
            adapter.adapt([1.5], SqlTypes.INTEGER)


class TestDefaultAdapter:
    def test_passes_through(self) -> None:
        value = [1, 2]
        assert ArrayValueAdapter().adapt(value, SqlTypes.INTEGER) is value


class TestBindParameters:
    def test_spanner_widens_array_parameters(self, spanner) -> None:
        params = [param((1, None), SqlTypes.ARRAY, SqlTypes.SMALLINT), param("x")]
        assert bind_parameters(params, spanner) == [[1, None], "x"]

    def test_postgres_keeps_arrays(self, postgres) -> None:
        value = (1, 2)
        assert bind_parameters([param(value, SqlTypes.ARRAY, SqlTypes.SMALLINT)], postgres) == [
            value
        ]
