"""Immutable SQL AST nodes. Translators inspect these and never mutate them."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum

from spansql.types import SqlTypes


class ComparisonOperator(StrEnum):
    EQUAL = "="
    NOT_EQUAL = "<>"
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    DISTINCT_FROM = "is distinct from"
    NOT_DISTINCT_FROM = "is not distinct from"

    @property
    def negated(self) -> ComparisonOperator:
        return _NEGATED_COMPARISONS[self]

    @property
    def strict(self) -> ComparisonOperator:
        """The exclusive form of an ordering operator (``<=`` becomes ``<``)."""
        if self is ComparisonOperator.LESS_THAN_OR_EQUAL:
            return ComparisonOperator.LESS_THAN
        if self is ComparisonOperator.GREATER_THAN_OR_EQUAL:
            return ComparisonOperator.GREATER_THAN
        return self

    @property
    def is_ordering(self) -> bool:
        return self in (
            ComparisonOperator.LESS_THAN,
            ComparisonOperator.LESS_THAN_OR_EQUAL,
            ComparisonOperator.GREATER_THAN,
            ComparisonOperator.GREATER_THAN_OR_EQUAL,
        )


_NEGATED_COMPARISONS: dict[ComparisonOperator, ComparisonOperator] = {
    ComparisonOperator.EQUAL: ComparisonOperator.NOT_EQUAL,
    ComparisonOperator.NOT_EQUAL: ComparisonOperator.EQUAL,
    ComparisonOperator.LESS_THAN: ComparisonOperator.GREATER_THAN_OR_EQUAL,
    ComparisonOperator.LESS_THAN_OR_EQUAL: ComparisonOperator.GREATER_THAN,
    ComparisonOperator.GREATER_THAN: ComparisonOperator.LESS_THAN_OR_EQUAL,
    ComparisonOperator.GREATER_THAN_OR_EQUAL: ComparisonOperator.LESS_THAN,
    ComparisonOperator.DISTINCT_FROM: ComparisonOperator.NOT_DISTINCT_FROM,
    ComparisonOperator.NOT_DISTINCT_FROM: ComparisonOperator.DISTINCT_FROM,
}


class ArithmeticOperator(StrEnum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    # Integer division when both operands are integral, true division otherwise.
    DIVIDE_PORTABLE = "divide_portable"
    MODULO = "modulo"

    @property
    def sql(self) -> str:
        return _ARITHMETIC_SYMBOLS[self]


_ARITHMETIC_SYMBOLS: dict[ArithmeticOperator, str] = {
    ArithmeticOperator.ADD: "+",
    ArithmeticOperator.SUBTRACT: "-",
    ArithmeticOperator.MULTIPLY: "*",
    ArithmeticOperator.DIVIDE: "/",
    ArithmeticOperator.DIVIDE_PORTABLE: "/",
    ArithmeticOperator.MODULO: "%",
}


class JunctionType(StrEnum):
    CONJUNCTION = "and"
    DISJUNCTION = "or"


class JoinType(StrEnum):
    INNER = "inner"
    LEFT = "left"
    RIGHT = "right"
    FULL = "full"
    CROSS = "cross"


class SetOperator(StrEnum):
    UNION = "union"
    UNION_ALL = "union all"
    INTERSECT = "intersect"
    INTERSECT_ALL = "intersect all"
    EXCEPT = "except"
    EXCEPT_ALL = "except all"


class SummarizationKind(StrEnum):
    ROLLUP = "rollup"
    CUBE = "cube"


class LockMode(StrEnum):
    NONE = "none"
    READ = "read"
    WRITE = "write"


class FollowOnLocking(StrEnum):
    """Whether locking may be applied by follow-up statements instead of a clause."""

    ALLOW = "allow"
    DISALLOW = "disallow"
    FORCE = "force"
    IGNORE = "ignore"


class LockStrategy(StrEnum):
    CLAUSE = "clause"
    FOLLOW_ON = "follow_on"
    NONE = "none"


LiteralValue = str | int | float | bool | Decimal | datetime.date | datetime.datetime | None


@dataclass(frozen=True)
class Literal:
    """A literal value: number, string, boolean, date/time, or NULL."""

    value: LiteralValue
    type_code: SqlTypes | None = None

    @classmethod
    def string(cls, v: str) -> Literal:
        return cls(value=v, type_code=SqlTypes.VARCHAR)

    @classmethod
    def integer(cls, v: int) -> Literal:
        return cls(value=v, type_code=SqlTypes.INTEGER)

    @classmethod
    def number(cls, v: int | float) -> Literal:
        return cls(value=v)

    @classmethod
    def null(cls) -> Literal:
        return cls(value=None)

    @classmethod
    def boolean(cls, v: bool) -> Literal:
        return cls(value=v, type_code=SqlTypes.BOOLEAN)


@dataclass(frozen=True)
class ColumnRef:
    """Reference to a column, optionally qualified by a table alias."""

    name: str
    table: str | None = None
    type_code: SqlTypes | None = None


@dataclass(frozen=True)
class Parameter:
    """A bound parameter; rendered as a placeholder and recorded for binding."""

    value: object = None
    type_code: SqlTypes | None = None
    element_type_code: SqlTypes | None = None


@dataclass(frozen=True)
class Star:
    """``*`` or ``alias.*``."""

    table: str | None = None


@dataclass(frozen=True)
class FunctionCall:
    """SQL function call, e.g. ``upper(col)``."""

    name: str
    args: list[Expr] = field(default_factory=list)
    distinct: bool = False
    type_code: SqlTypes | None = None


@dataclass(frozen=True)
class WindowFunction:
    """Window function: func(args) over ([partition by ...] [order by ...])."""

    func_name: str
    args: list[Expr] = field(default_factory=list)
    partition_by: list[Expr] = field(default_factory=list)
    order_by: list[OrderByItem] = field(default_factory=list)


@dataclass(frozen=True)
class BinaryArithmetic:
    """Arithmetic on two operands: left op right."""

    left: Expr
    op: ArithmeticOperator
    right: Expr
    type_code: SqlTypes | None = None


@dataclass(frozen=True)
class Summarization:
    """ROLLUP / CUBE grouping item."""

    kind: SummarizationKind
    groupings: list[Expr] = field(default_factory=list)


@dataclass(frozen=True)
class SqlTuple:
    """A row value: (a, b, ...)."""

    expressions: list[Expr] = field(default_factory=list)


@dataclass(frozen=True)
class AnySubquery:
    """``any (subquery)`` on the right-hand side of a comparison."""

    subquery: QueryPart


@dataclass(frozen=True)
class EverySubquery:
    """``all (subquery)`` on the right-hand side of a comparison."""

    subquery: QueryPart


@dataclass(frozen=True)
class SubqueryExpr:
    """A subquery used as an expression."""

    query: QueryPart


@dataclass(frozen=True)
class SqlSelection:
    """One item of a select list, with an optional alias."""

    expr: Expr
    alias: str | None = None


@dataclass(frozen=True)
class Comparison:
    """lhs op rhs."""

    lhs: Expr
    op: ComparisonOperator
    rhs: Expr


@dataclass(frozen=True)
class Junction:
    """AND / OR over a list of predicates."""

    type: JunctionType
    predicates: list[Expr] = field(default_factory=list)


@dataclass(frozen=True)
class NegatedPredicate:
    predicate: Expr


@dataclass(frozen=True)
class NullnessPredicate:
    """IS NULL / IS NOT NULL check."""

    expr: Expr
    negated: bool = False


@dataclass(frozen=True)
class InListPredicate:
    """expr IN (v1, v2, ...) or NOT IN."""

    expr: Expr
    values: list[Expr] = field(default_factory=list)
    negated: bool = False


@dataclass(frozen=True)
class InSubqueryPredicate:
    expr: Expr
    query: QueryPart
    negated: bool = False


@dataclass(frozen=True)
class InArrayPredicate:
    """Membership of a value in an array-valued parameter."""

    test_expression: Expr
    array_parameter: Expr


@dataclass(frozen=True)
class LikePredicate:
    """match [NOT] LIKE pattern [ESCAPE escape_character]."""

    match: Expr
    pattern: Expr
    escape_character: Expr | None = None
    case_sensitive: bool = True
    negated: bool = False


@dataclass(frozen=True)
class ExistsPredicate:
    query: QueryPart
    negated: bool = False


# The union of all expression types. Predicates are expressions too.
Expr = (
    Literal
    | ColumnRef
    | Parameter
    | Star
    | FunctionCall
    | WindowFunction
    | BinaryArithmetic
    | Summarization
    | SqlTuple
    | AnySubquery
    | EverySubquery
    | SubqueryExpr
    | Comparison
    | Junction
    | NegatedPredicate
    | NullnessPredicate
    | InListPredicate
    | InSubqueryPredicate
    | InArrayPredicate
    | LikePredicate
    | ExistsPredicate
)


@dataclass(frozen=True)
class NamedTableReference:
    """A physical table, optionally with an identification variable (alias)."""

    table_name: str
    identification_variable: str | None = None


@dataclass(frozen=True, kw_only=True)
class DerivedTableReference:
    """A table reference producing rows from something other than a table."""

    identification_variable: str | None = None
    column_names: list[str] = field(default_factory=list)
    lateral: bool = False


@dataclass(frozen=True, kw_only=True)
class QueryPartTableReference(DerivedTableReference):
    """A subquery used as a row source in the FROM clause."""

    query: QueryPart


TableReference = NamedTableReference | QueryPartTableReference


@dataclass(frozen=True)
class TableJoin:
    join_type: JoinType
    reference: TableReference
    predicate: Expr | None = None


@dataclass(frozen=True)
class TableGroup:
    """A root table reference plus the joins hanging off it."""

    primary: TableReference
    joins: list[TableJoin] = field(default_factory=list)


@dataclass(frozen=True)
class OrderByItem:
    """ORDER BY item with direction."""

    expr: Expr
    desc: bool = False
    nulls_last: bool | None = None


@dataclass(frozen=True)
class SelectClause:
    selections: list[SqlSelection] = field(default_factory=list)
    distinct: bool = False


@dataclass(frozen=True)
class LockOptions:
    mode: LockMode = LockMode.WRITE
    follow_on: FollowOnLocking = FollowOnLocking.ALLOW


@dataclass(frozen=True)
class QuerySpec:
    """A single SELECT ... FROM ... query block."""

    select_clause: SelectClause = field(default_factory=SelectClause)
    from_: list[TableGroup] = field(default_factory=list)
    where: Expr | None = None
    group_by: list[Expr] = field(default_factory=list)
    having: Expr | None = None
    order_by: list[OrderByItem] = field(default_factory=list)
    offset: Expr | None = None
    fetch: Expr | None = None
    lock: LockOptions | None = None


@dataclass(frozen=True)
class QueryGroup:
    """Set operation (UNION, INTERSECT, EXCEPT) over query parts."""

    set_operator: SetOperator
    parts: list[QueryPart] = field(default_factory=list)
    order_by: list[OrderByItem] = field(default_factory=list)
    offset: Expr | None = None
    fetch: Expr | None = None


QueryPart = QuerySpec | QueryGroup


@dataclass(frozen=True)
class Assignment:
    column: ColumnRef
    value: Expr


@dataclass(frozen=True)
class ConflictClause:
    """Upsert behaviour attached to an INSERT statement."""

    do_update: bool = False
    constraint_name: str | None = None
    constraint_columns: list[str] = field(default_factory=list)
    assignments: list[Assignment] = field(default_factory=list)
    predicate: Expr | None = None


@dataclass(frozen=True)
class SelectStatement:
    query: QueryPart


@dataclass(frozen=True)
class InsertStatement:
    """INSERT with either a query source or VALUES rows."""

    target_table: NamedTableReference
    target_columns: list[ColumnRef] = field(default_factory=list)
    source: QueryPart | None = None
    values: list[list[Expr]] = field(default_factory=list)
    conflict_clause: ConflictClause | None = None
    returning: list[ColumnRef] = field(default_factory=list)


@dataclass(frozen=True)
class UpdateStatement:
    target_table: NamedTableReference
    assignments: list[Assignment] = field(default_factory=list)
    restriction: Expr | None = None
    returning: list[ColumnRef] = field(default_factory=list)


@dataclass(frozen=True)
class DeleteStatement:
    target_table: NamedTableReference
    restriction: Expr | None = None
    returning: list[ColumnRef] = field(default_factory=list)


Statement = SelectStatement | InsertStatement | UpdateStatement | DeleteStatement
