"""JDBC-style SQL type codes used by AST nodes, binding and DDL generation."""

from __future__ import annotations

from enum import IntEnum


class SqlTypes(IntEnum):
    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    TIMESTAMP_WITH_TIMEZONE = 2014
    BINARY = -2
    VARBINARY = -3
    BOOLEAN = 16
    JSON = 3001
    ARRAY = 2003


# Types whose values are whole numbers narrower than or equal to 64 bits.
INTEGRAL_TYPES: frozenset[SqlTypes] = frozenset(
    {SqlTypes.TINYINT, SqlTypes.SMALLINT, SqlTypes.INTEGER, SqlTypes.BIGINT}
)

NARROW_INTEGRAL_TYPES: frozenset[SqlTypes] = frozenset(
    {SqlTypes.TINYINT, SqlTypes.SMALLINT, SqlTypes.INTEGER}
)


def is_integral(type_code: int | None) -> bool:
    """True when the type code denotes an integer type of any width."""
    return type_code in INTEGRAL_TYPES
