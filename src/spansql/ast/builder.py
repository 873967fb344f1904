"""Fluent builder API for constructing SQL AST nodes."""

from __future__ import annotations

from typing import Self

from spansql.ast.nodes import (
    ColumnRef,
    Comparison,
    ComparisonOperator,
    Expr,
    FunctionCall,
    JoinType,
    Junction,
    JunctionType,
    Literal,
    LiteralValue,
    LockOptions,
    NamedTableReference,
    OrderByItem,
    Parameter,
    QueryPart,
    QueryPartTableReference,
    QuerySpec,
    SelectClause,
    SqlSelection,
    TableGroup,
    TableJoin,
    TableReference,
)
from spansql.types import SqlTypes


class QueryBuilder:
    """Fluent builder for ergonomic QuerySpec construction."""

    def __init__(self) -> None:
        self._selections: list[SqlSelection] = []
        self._distinct = False
        self._from: list[TableGroup] = []
        self._where: Expr | None = None
        self._group_by: list[Expr] = []
        self._having: Expr | None = None
        self._order_by: list[OrderByItem] = []
        self._offset: Expr | None = None
        self._fetch: Expr | None = None
        self._lock: LockOptions | None = None

    def select(self, *exprs: Expr) -> Self:
        self._selections.extend(SqlSelection(expr=e) for e in exprs)
        return self

    def select_aliased(self, expr: Expr, alias: str) -> Self:
        self._selections.append(SqlSelection(expr=expr, alias=alias))
        return self

    def distinct(self) -> Self:
        self._distinct = True
        return self

    def from_(self, table: str, alias: str | None = None) -> Self:
        self._from.append(TableGroup(primary=NamedTableReference(table, alias)))
        return self

    def from_subquery(
        self,
        subquery: QueryPart,
        alias: str,
        *,
        column_names: list[str] | None = None,
        lateral: bool = False,
    ) -> Self:
        reference = QueryPartTableReference(
            query=subquery,
            identification_variable=alias,
            column_names=column_names or [],
            lateral=lateral,
        )
        self._from.append(TableGroup(primary=reference))
        return self

    def join(
        self,
        reference: str | TableReference,
        on: Expr | None = None,
        join_type: JoinType = JoinType.INNER,
        alias: str | None = None,
    ) -> Self:
        if not self._from:
            raise ValueError("join() requires a preceding from_()")
        if isinstance(reference, str):
            reference = NamedTableReference(reference, alias)
        last = self._from[-1]
        self._from[-1] = TableGroup(
            primary=last.primary,
            joins=[*last.joins, TableJoin(join_type=join_type, reference=reference, predicate=on)],
        )
        return self

    def where(self, condition: Expr) -> Self:
        self._where = condition if self._where is None else and_(self._where, condition)
        return self

    def group_by(self, *exprs: Expr) -> Self:
        self._group_by.extend(exprs)
        return self

    def having(self, condition: Expr) -> Self:
        self._having = condition if self._having is None else and_(self._having, condition)
        return self

    def order_by(self, expr: Expr, desc: bool = False) -> Self:
        self._order_by.append(OrderByItem(expr=expr, desc=desc))
        return self

    def offset(self, n: int | Expr) -> Self:
        self._offset = Literal.integer(n) if isinstance(n, int) else n
        return self

    def fetch(self, n: int | Expr) -> Self:
        self._fetch = Literal.integer(n) if isinstance(n, int) else n
        return self

    def lock(self, options: LockOptions) -> Self:
        self._lock = options
        return self

    def build(self) -> QuerySpec:
        return QuerySpec(
            select_clause=SelectClause(selections=self._selections, distinct=self._distinct),
            from_=self._from,
            where=self._where,
            group_by=self._group_by,
            having=self._having,
            order_by=self._order_by,
            offset=self._offset,
            fetch=self._fetch,
            lock=self._lock,
        )


# Convenience constructors for common expressions.


def col(name: str, table: str | None = None, type_code: SqlTypes | None = None) -> ColumnRef:
    """Create a column reference."""
    return ColumnRef(name=name, table=table, type_code=type_code)


def func(name: str, *args: Expr, distinct: bool = False) -> FunctionCall:
    """Create a function call."""
    return FunctionCall(name=name, args=list(args), distinct=distinct)


def lit(value: LiteralValue) -> Literal:
    """Create a literal value."""
    return Literal(value=value)


def param(
    value: object = None,
    type_code: SqlTypes | None = None,
    element_type_code: SqlTypes | None = None,
) -> Parameter:
    """Create a bound parameter."""
    return Parameter(value=value, type_code=type_code, element_type_code=element_type_code)


def eq(left: Expr, right: Expr) -> Comparison:
    """Create an equality comparison."""
    return Comparison(lhs=left, op=ComparisonOperator.EQUAL, rhs=right)


def and_(*conditions: Expr) -> Expr:
    """Combine conditions with AND, flattening nested conjunctions."""
    predicates: list[Expr] = []
    for cond in conditions:
        if isinstance(cond, Junction) and cond.type is JunctionType.CONJUNCTION:
            predicates.extend(cond.predicates)
        else:
            predicates.append(cond)
    if not predicates:
        return Literal.boolean(True)
    if len(predicates) == 1:
        return predicates[0]
    return Junction(type=JunctionType.CONJUNCTION, predicates=predicates)


def or_(*conditions: Expr) -> Expr:
    """Combine conditions with OR."""
    if not conditions:
        return Literal.boolean(False)
    if len(conditions) == 1:
        return conditions[0]
    return Junction(type=JunctionType.DISJUNCTION, predicates=list(conditions))
