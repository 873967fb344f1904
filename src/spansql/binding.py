"""Value marshalling applied when binding parameters to the database driver."""

from __future__ import annotations

import operator
from collections.abc import Sequence
from typing import TYPE_CHECKING

from spansql.ast.nodes import Parameter
from spansql.types import NARROW_INTEGRAL_TYPES, SqlTypes

if TYPE_CHECKING:
    from spansql.dialect.base import Dialect


class ArrayValueAdapter:
    """Adapts an assembled array value before it is handed to the driver."""

    def adapt(
        self, value: Sequence[object] | None, element_type_code: SqlTypes | None
    ) -> Sequence[object] | None:
        return value


class SpannerArrayValueAdapter(ArrayValueAdapter):
    """Widens TINYINT, SMALLINT and INTEGER arrays to 64-bit integer arrays.

    Spanner maps all three types to INT64 and its driver only accepts INT64
    arrays on the wire. Null elements stay null, in position.
    """

    def adapt(
        self, value: Sequence[object] | None, element_type_code: SqlTypes | None
    ) -> Sequence[object] | None:
        if value is None or element_type_code not in NARROW_INTEGRAL_TYPES:
            return value
        return [None if element is None else operator.index(element) for element in value]


def bind_parameters(parameters: Sequence[Parameter], dialect: Dialect) -> list[object]:
    """Return driver-ready values for ``parameters``, in placeholder order."""
    adapter = dialect.array_value_adapter
    values: list[object] = []
    for parameter in parameters:
        if parameter.type_code is SqlTypes.ARRAY:
            values.append(adapter.adapt(parameter.value, parameter.element_type_code))
        else:
            values.append(parameter.value)
    return values
