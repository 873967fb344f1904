"""Default SQL rendering: walks a statement AST and writes standard SQL text."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from decimal import Decimal
from io import StringIO
from typing import TYPE_CHECKING

from spansql.ast.nodes import (
    AnySubquery,
    ArithmeticOperator,
    Assignment,
    BinaryArithmetic,
    ColumnRef,
    Comparison,
    ComparisonOperator,
    ConflictClause,
    DeleteStatement,
    DerivedTableReference,
    EverySubquery,
    ExistsPredicate,
    Expr,
    FollowOnLocking,
    FunctionCall,
    InArrayPredicate,
    InListPredicate,
    InsertStatement,
    InSubqueryPredicate,
    JoinType,
    Junction,
    JunctionType,
    LikePredicate,
    Literal,
    LiteralValue,
    LockMode,
    LockStrategy,
    NamedTableReference,
    NegatedPredicate,
    NullnessPredicate,
    OrderByItem,
    Parameter,
    QueryGroup,
    QueryPart,
    QueryPartTableReference,
    QuerySpec,
    SelectClause,
    SelectStatement,
    SetOperator,
    SqlTuple,
    Star,
    Statement,
    SubqueryExpr,
    Summarization,
    TableGroup,
    TableJoin,
    TableReference,
    UpdateStatement,
    WindowFunction,
)
from spansql.errors import (
    IllegalQueryOperationError,
    UnresolvableLiteralError,
    UnsupportedOperationError,
)
from spansql.translator.clause import Clause, ClauseStack
from spansql.types import SqlTypes, is_integral

if TYPE_CHECKING:
    from spansql.dialect.base import Dialect

logger = logging.getLogger("spansql.translator")

WriteFunc = Callable[[], None]
"""Callback that writes a fragment to the translator's SQL buffer."""

# Stand-in row limit for dialects that only accept OFFSET after LIMIT.
MAX_LIMIT = 9223372036854775807


@dataclass
class TranslationResult:
    """SQL text plus the side channels accumulated while rendering it."""

    sql: str
    parameters: list[Parameter] = field(default_factory=list)
    follow_on_locking: bool = False


def expression_type(expr: Expr) -> SqlTypes | None:
    """Best-effort SQL type of an expression, ``None`` when unknown."""
    match expr:
        case Literal(type_code=code) if code is not None:
            return code
        case Literal(value=bool()):
            return SqlTypes.BOOLEAN
        case Literal(value=int()):
            return SqlTypes.BIGINT
        case Literal(value=float()):
            return SqlTypes.DOUBLE
        case Literal(value=Decimal()):
            return SqlTypes.NUMERIC
        case Literal(value=str()):
            return SqlTypes.VARCHAR
        case Literal(value=datetime.datetime()):
            return SqlTypes.TIMESTAMP
        case Literal(value=datetime.date()):
            return SqlTypes.DATE
        case ColumnRef(type_code=code) | Parameter(type_code=code) | FunctionCall(type_code=code):
            return code
        case BinaryArithmetic(type_code=code) if code is not None:
            return code
        case BinaryArithmetic(left=left, op=op, right=right):
            if op is ArithmeticOperator.DIVIDE:
                return None
            if is_integral(expression_type(left)) and is_integral(expression_type(right)):
                return SqlTypes.BIGINT
            return None
        case _:
            return None


def _alias_selections(part: QueryPart, column_names: list[str]) -> QueryPart:
    """Push derived-table column names into the select list as aliases."""
    match part:
        case QuerySpec(select_clause=select_clause):
            selections = select_clause.selections
            if len(selections) != len(column_names) or any(
                isinstance(s.expr, Star) for s in selections
            ):
                raise IllegalQueryOperationError(
                    f"Can't apply column aliases {column_names} to a select list "
                    f"of {len(selections)} item(s)"
                )
            aliased = [replace(s, alias=n) for s, n in zip(selections, column_names, strict=True)]
            return replace(part, select_clause=replace(select_clause, selections=aliased))
        case QueryGroup(parts=[first, *rest]):
            return replace(part, parts=[_alias_selections(first, column_names), *rest])
        case _:
            raise IllegalQueryOperationError("Can't apply column aliases to an empty query group")


class SqlAstTranslator:
    """Renders one statement to SQL text using standard syntax.

    Dialect translators subclass this and override the hooks whose default
    rendering their database rejects; the generic emulation helpers defined
    here are available to them. An instance translates exactly one statement.
    """

    def __init__(self, dialect: Dialect, statement: Statement) -> None:
        self._dialect = dialect
        self._statement = statement
        self._sql = StringIO()
        self._clause_stack = ClauseStack()
        self._parameters: list[Parameter] = []
        self._follow_on_locking = False
        self._translated = False

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def clause_stack(self) -> ClauseStack:
        return self._clause_stack

    def translate(self) -> TranslationResult:
        if self._translated:
            raise RuntimeError("A translator instance translates exactly one statement")
        self._translated = True
        self.visit_statement(self._statement)
        sql = self._sql.getvalue()
        logger.debug("Rendered %s for %s: %s", type(self._statement).__name__, self._dialect.name, sql)
        return TranslationResult(
            sql=sql,
            parameters=list(self._parameters),
            follow_on_locking=self._follow_on_locking,
        )

    def append_sql(self, *fragments: str) -> None:
        for fragment in fragments:
            self._sql.write(fragment)

    def _render_comma_separated(
        self, items: Sequence[Expr], render: Callable[[Expr], None] | None = None
    ) -> None:
        render = render or self.visit
        for i, item in enumerate(items):
            if i:
                self.append_sql(", ")
            render(item)

    # --- Statements ---

    def visit_statement(self, statement: Statement) -> None:
        match statement:
            case SelectStatement(query=query):
                self.visit_query_part(query)
            case InsertStatement():
                self.visit_insert_statement_only(statement)
            case UpdateStatement():
                self.visit_update_statement_only(statement)
            case DeleteStatement():
                self.visit_delete_statement_only(statement)
            case _:
                raise ValueError(f"Unknown statement type: {type(statement).__name__}")

    def visit_insert_statement_only(self, statement: InsertStatement) -> None:
        with self._clause_stack.push(Clause.INSERT):
            self.append_sql("insert into ")
            self.render_dml_target_table_expression(statement.target_table)
            self.render_insert_target_columns(statement.target_columns)
        self.visit_insert_source(statement)
        self.visit_conflict_clause(statement.conflict_clause)
        self.visit_returning_columns(statement.returning)

    def render_insert_target_columns(self, columns: list[ColumnRef]) -> None:
        if columns:
            self.append_sql(" (", ", ".join(c.name for c in columns), ")")

    def visit_insert_source(self, statement: InsertStatement) -> None:
        if statement.source is not None:
            self.append_sql(" ")
            self.visit_query_part(statement.source)
            return
        if not statement.values:
            raise IllegalQueryOperationError("INSERT requires a query source or VALUES rows")
        with self._clause_stack.push(Clause.VALUES):
            self.append_sql(" values ")
            for i, row in enumerate(statement.values):
                if i:
                    self.append_sql(", ")
                self.append_sql("(")
                self._render_comma_separated(row)
                self.append_sql(")")

    def visit_conflict_clause(self, conflict_clause: ConflictClause | None) -> None:
        if conflict_clause is None:
            return
        with self._clause_stack.push(Clause.CONFLICT):
            self.append_sql(" on conflict")
            if conflict_clause.constraint_name is not None:
                self.append_sql(" on constraint ", conflict_clause.constraint_name)
            elif conflict_clause.constraint_columns:
                self.append_sql(" (", ", ".join(conflict_clause.constraint_columns), ")")
            if not conflict_clause.do_update:
                self.append_sql(" do nothing")
                return
            if not conflict_clause.assignments:
                raise IllegalQueryOperationError("A 'do update' conflict clause needs assignments")
            self.append_sql(" do update set ")
            for i, assignment in enumerate(conflict_clause.assignments):
                if i:
                    self.append_sql(", ")
                self.visit_assignment(assignment)
            if self.has_where(conflict_clause.predicate):
                self.append_sql(" where ")
                self.visit(conflict_clause.predicate)

    def visit_update_statement_only(self, statement: UpdateStatement) -> None:
        self.render_update_clause(statement)
        self.render_set_clause(statement.assignments)
        self.visit_where_clause(statement.restriction)
        self.visit_returning_columns(statement.returning)

    def render_update_clause(self, statement: UpdateStatement) -> None:
        with self._clause_stack.push(Clause.UPDATE):
            self.append_sql("update ")
            self.render_dml_target_table_expression(statement.target_table)

    def render_set_clause(self, assignments: list[Assignment]) -> None:
        with self._clause_stack.push(Clause.SET):
            self.append_sql(" set ")
            for i, assignment in enumerate(assignments):
                if i:
                    self.append_sql(", ")
                self.visit_assignment(assignment)

    def visit_assignment(self, assignment: Assignment) -> None:
        self.visit(assignment.column)
        self.append_sql(" = ")
        self.visit(assignment.value)

    def visit_delete_statement_only(self, statement: DeleteStatement) -> None:
        self.render_delete_clause(statement)
        self.visit_where_clause(statement.restriction)
        self.visit_returning_columns(statement.returning)

    def render_delete_clause(self, statement: DeleteStatement) -> None:
        with self._clause_stack.push(Clause.DELETE):
            self.append_sql("delete from ")
            self.render_dml_target_table_expression(statement.target_table)

    def render_dml_target_table_expression(self, table_reference: NamedTableReference) -> None:
        self.append_sql(table_reference.table_name)

    def visit_returning_columns(self, returning_columns: list[ColumnRef]) -> None:
        if not returning_columns:
            return
        with self._clause_stack.push(Clause.RETURNING):
            self.append_sql(" returning ")
            self._render_comma_separated(returning_columns)

    @staticmethod
    def has_where(restriction: Expr | None) -> bool:
        if restriction is None:
            return False
        return not (isinstance(restriction, Junction) and not restriction.predicates)

    # --- Query parts ---

    def visit_query_part(self, query_part: QueryPart) -> None:
        match query_part:
            case QuerySpec():
                self.visit_query_spec(query_part)
            case QueryGroup():
                self.visit_query_group(query_part)
            case _:
                raise ValueError(f"Unknown query part type: {type(query_part).__name__}")

    def visit_subquery(self, query_part: QueryPart) -> None:
        self.append_sql("(")
        self.visit_query_part(query_part)
        self.append_sql(")")

    def visit_query_spec(self, query_spec: QuerySpec) -> None:
        self.visit_select_clause(query_spec.select_clause)
        self.visit_query_spec_clauses(query_spec)

    def visit_query_spec_clauses(self, query_spec: QuerySpec) -> None:
        """Render everything after the select list, in clause order."""
        self.visit_from_clause(query_spec.from_)
        self.visit_where_clause(query_spec.where)
        self.visit_group_by_clause(query_spec.group_by)
        self.visit_having_clause(query_spec.having)
        self.visit_order_by(query_spec.order_by)
        self.visit_offset_fetch_clause(query_spec)
        self.visit_for_update_clause(query_spec)

    def visit_query_group(self, query_group: QueryGroup) -> None:
        self.render_query_group_parts(query_group)
        self.visit_order_by(query_group.order_by)
        self.visit_offset_fetch_clause(query_group)

    def render_query_group_parts(self, query_group: QueryGroup) -> None:
        separator = f" {self._dialect.set_operator_sql(query_group.set_operator)} "
        for i, part in enumerate(query_group.parts):
            if i:
                self.append_sql(separator)
            if isinstance(part, QueryGroup) or part.order_by or part.offset or part.fetch:
                self.visit_subquery(part)
            else:
                self.visit_query_part(part)

    def visit_select_clause(self, select_clause: SelectClause) -> None:
        with self._clause_stack.push(Clause.SELECT):
            self.append_sql("select ")
            if select_clause.distinct:
                self.append_sql("distinct ")
            self.visit_sql_selections(select_clause)

    def visit_sql_selections(self, select_clause: SelectClause) -> None:
        if not select_clause.selections:
            self.append_sql("*")
            return
        for i, selection in enumerate(select_clause.selections):
            if i:
                self.append_sql(", ")
            self.visit(selection.expr)
            if selection.alias:
                self.append_sql(" as ", selection.alias)

    def visit_from_clause(self, table_groups: list[TableGroup]) -> None:
        if not table_groups:
            return
        with self._clause_stack.push(Clause.FROM):
            self.append_sql(" from ")
            for i, table_group in enumerate(table_groups):
                if i:
                    self.append_sql(", ")
                self.visit_table_group(table_group)

    def visit_table_group(self, table_group: TableGroup) -> None:
        self.visit_table_reference(table_group.primary)
        for join in table_group.joins:
            self.visit_table_join(join)

    def visit_table_join(self, table_join: TableJoin) -> None:
        self.append_sql(" ", table_join.join_type.value, " join ")
        self.visit_table_reference(table_join.reference)
        if table_join.join_type is JoinType.CROSS:
            return
        self.append_sql(" on ")
        if table_join.predicate is None:
            self.append_sql("true")
        else:
            self.visit(table_join.predicate)

    def visit_table_reference(self, table_reference: TableReference) -> None:
        match table_reference:
            case NamedTableReference():
                self.append_sql(table_reference.table_name)
                self.render_table_reference_identification_variable(table_reference)
            case DerivedTableReference():
                self.render_derived_table_reference(table_reference)
            case _:
                raise ValueError(f"Unknown table reference type: {type(table_reference).__name__}")

    def render_derived_table_reference(self, table_reference: DerivedTableReference) -> None:
        if table_reference.lateral:
            if not self._dialect.capabilities.supports_lateral:
                raise UnsupportedOperationError(
                    f"LATERAL is not supported by dialect '{self._dialect.name}'"
                )
            self.append_sql("lateral ")
        self.visit_derived_table_reference(table_reference)

    def visit_derived_table_reference(self, table_reference: DerivedTableReference) -> None:
        match table_reference:
            case QueryPartTableReference():
                self.visit_query_part_table_reference(table_reference)
            case _:
                raise ValueError(f"Unknown derived table type: {type(table_reference).__name__}")

    def visit_query_part_table_reference(self, table_reference: QueryPartTableReference) -> None:
        self.visit_subquery(table_reference.query)
        self.render_derived_table_reference_identification_variable(table_reference)

    def render_derived_table_reference_identification_variable(
        self, table_reference: DerivedTableReference
    ) -> None:
        self.render_table_reference_identification_variable(table_reference)
        if table_reference.column_names:
            self.append_sql("(", ", ".join(table_reference.column_names), ")")

    def render_table_reference_identification_variable(
        self, table_reference: TableReference
    ) -> None:
        if table_reference.identification_variable:
            self.append_sql(" ", table_reference.identification_variable)

    def emulate_query_part_table_reference_column_aliasing(
        self, table_reference: QueryPartTableReference
    ) -> None:
        """Render a derived table whose column names are applied inside the subquery.

        ``(select a, b from t) x(c1, c2)`` becomes
        ``(select a as c1, b as c2 from t) x`` for dialects without a
        derived column list.
        """
        query = table_reference.query
        if table_reference.column_names:
            query = _alias_selections(query, table_reference.column_names)
        self.visit_subquery(query)
        self.render_table_reference_identification_variable(table_reference)

    def visit_where_clause(self, restriction: Expr | None) -> None:
        if not self.has_where(restriction):
            return
        with self._clause_stack.push(Clause.WHERE):
            self.append_sql(" where ")
            self.visit(restriction)

    def visit_group_by_clause(self, group_by: list[Expr]) -> None:
        if not group_by:
            return
        with self._clause_stack.push(Clause.GROUP):
            self.append_sql(" group by ")
            self._render_comma_separated(group_by, self.render_partition_item)

    def render_partition_item(self, expression: Expr) -> None:
        match expression:
            case Literal():
                # A constant grouping key is the empty grouping set.
                self.append_sql("()")
            case Summarization(kind=kind, groupings=groupings):
                self.append_sql(kind.value, " (")
                self._render_comma_separated(groupings)
                self.append_sql(")")
            case _:
                self.visit(expression)

    def visit_having_clause(self, having: Expr | None) -> None:
        if not self.has_where(having):
            return
        with self._clause_stack.push(Clause.HAVING):
            self.append_sql(" having ")
            self.visit(having)

    def visit_order_by(self, order_by: list[OrderByItem]) -> None:
        if not order_by:
            return
        with self._clause_stack.push(Clause.ORDER):
            self.append_sql(" order by ")
            for i, item in enumerate(order_by):
                if i:
                    self.append_sql(", ")
                self.visit_sort_specification(item)

    def visit_sort_specification(self, item: OrderByItem) -> None:
        self.visit(item.expr)
        if item.desc:
            self.append_sql(" desc")
        if item.nulls_last is True:
            self.append_sql(" nulls last")
        elif item.nulls_last is False:
            self.append_sql(" nulls first")

    def visit_offset_fetch_clause(self, query_part: QueryPart) -> None:
        if query_part.offset is not None:
            with self._clause_stack.push(Clause.OFFSET):
                self.append_sql(" offset ")
                self.visit(query_part.offset)
                self.append_sql(" rows")
        if query_part.fetch is not None:
            with self._clause_stack.push(Clause.FETCH):
                self.append_sql(" fetch first ")
                self.visit(query_part.fetch)
                self.append_sql(" rows only")

    def render_limit_offset_clause(self, query_part: QueryPart) -> None:
        if query_part.fetch is not None:
            with self._clause_stack.push(Clause.FETCH):
                self.append_sql(" limit ")
                self.visit(query_part.fetch)
        elif query_part.offset is not None:
            self.append_sql(" limit ", str(MAX_LIMIT))
        if query_part.offset is not None:
            with self._clause_stack.push(Clause.OFFSET):
                self.append_sql(" offset ")
                self.visit(query_part.offset)

    def determine_locking_strategy(
        self, query_spec: QuerySpec, follow_on_locking: FollowOnLocking
    ) -> LockStrategy:
        lock = query_spec.lock
        if lock is None or lock.mode is LockMode.NONE:
            return LockStrategy.NONE
        if follow_on_locking is FollowOnLocking.FORCE:
            return LockStrategy.FOLLOW_ON
        supported = self._dialect.capabilities.supports_row_locking
        if follow_on_locking is FollowOnLocking.ALLOW and (
            self._dialect.follow_on_locking or not supported
        ):
            return LockStrategy.FOLLOW_ON
        return LockStrategy.CLAUSE if supported else LockStrategy.NONE

    def visit_for_update_clause(self, query_spec: QuerySpec) -> None:
        if query_spec.lock is None:
            return
        strategy = self.determine_locking_strategy(query_spec, query_spec.lock.follow_on)
        if strategy is LockStrategy.CLAUSE:
            with self._clause_stack.push(Clause.FOR_UPDATE):
                if query_spec.lock.mode is LockMode.READ:
                    self.append_sql(" for share")
                else:
                    self.append_sql(" for update")
        elif strategy is LockStrategy.FOLLOW_ON:
            self._follow_on_locking = True

    # --- Expressions ---

    def visit(self, node: Expr) -> None:
        """Dispatch an expression or predicate node to its rendering method."""
        match node:
            case Literal(value=value):
                self.render_literal(value)
            case ColumnRef(name=name, table=None):
                self.append_sql(name)
            case ColumnRef(name=name, table=table):
                self.append_sql(table, ".", name)
            case Parameter():
                self.visit_parameter(node)
            case Star(table=None):
                self.append_sql("*")
            case Star(table=table):
                self.append_sql(table, ".*")
            case FunctionCall(name=name, args=args, distinct=distinct):
                self.append_sql(name, "(")
                if distinct:
                    self.append_sql("distinct ")
                self._render_comma_separated(args)
                self.append_sql(")")
            case WindowFunction():
                self.visit_window_function(node)
            case BinaryArithmetic():
                self.visit_binary_arithmetic(node)
            case Summarization():
                self.render_partition_item(node)
            case SqlTuple(expressions=expressions):
                self.append_sql("(")
                self._render_comma_separated(expressions)
                self.append_sql(")")
            case AnySubquery(subquery=subquery):
                self.append_sql("any ")
                self.visit_subquery(subquery)
            case EverySubquery(subquery=subquery):
                self.append_sql("all ")
                self.visit_subquery(subquery)
            case SubqueryExpr(query=query):
                self.visit_subquery(query)
            case Comparison():
                self.visit_comparison(node)
            case Junction():
                self.visit_junction(node)
            case NegatedPredicate(predicate=predicate):
                self.append_sql("not (")
                self.visit(predicate)
                self.append_sql(")")
            case NullnessPredicate(expr=expr, negated=negated):
                self.visit(expr)
                self.append_sql(" is not null" if negated else " is null")
            case InListPredicate():
                self.visit_in_list_predicate(node)
            case InSubqueryPredicate(expr=expr, query=query, negated=negated):
                self.visit(expr)
                self.append_sql(" not in " if negated else " in ")
                self.visit_subquery(query)
            case InArrayPredicate():
                self.visit_in_array_predicate(node)
            case LikePredicate():
                self.visit_like_predicate(node)
            case ExistsPredicate(query=query, negated=negated):
                self.append_sql("not exists " if negated else "exists ")
                self.visit_subquery(query)
            case _:
                raise ValueError(f"Unknown AST node type: {type(node).__name__}")

    def render_literal(self, value: LiteralValue) -> None:
        match value:
            case None:
                self.append_sql("null")
            case True:
                self.append_sql("true")
            case False:
                self.append_sql("false")
            case str():
                self.append_sql("'", self._dialect.escape_literal(value), "'")
            case datetime.datetime():
                self.append_sql("timestamp '", value.isoformat(sep=" "), "'")
            case datetime.date():
                self.append_sql("date '", value.isoformat(), "'")
            case int() | float() | Decimal():
                self.append_sql(str(value))
            case _:
                raise ValueError(f"Unsupported literal value type: {type(value).__name__}")

    def resolve_literal_value(self, expression: Expr) -> LiteralValue:
        """Return the value of an expression that must be a literal at translation time."""
        match expression:
            case Literal(value=value):
                return value
            case _:
                raise UnresolvableLiteralError(
                    f"Can't resolve {type(expression).__name__} to a literal value"
                )

    def visit_parameter(self, parameter: Parameter) -> None:
        self._parameters.append(parameter)
        self.append_sql("?")

    def visit_window_function(self, window_function: WindowFunction) -> None:
        self.append_sql(window_function.func_name, "(")
        self._render_comma_separated(window_function.args)
        self.append_sql(") over (")
        if window_function.partition_by:
            with self._clause_stack.push(Clause.PARTITION):
                self.append_sql("partition by ")
                self._render_comma_separated(window_function.partition_by, self.render_partition_item)
        if window_function.order_by:
            if window_function.partition_by:
                self.append_sql(" ")
            self.append_sql("order by ")
            for i, item in enumerate(window_function.order_by):
                if i:
                    self.append_sql(", ")
                self.visit_sort_specification(item)
        self.append_sql(")")

    def visit_binary_arithmetic(self, arithmetic: BinaryArithmetic) -> None:
        if self.is_integer_division_emulation_required(arithmetic):
            self.append_sql("trunc(")
            self.visit_arithmetic_operand(arithmetic.left)
            self.append_sql(" / ")
            self.visit_arithmetic_operand(arithmetic.right)
            self.append_sql(")")
            return
        self.visit_arithmetic_operand(arithmetic.left)
        self.append_sql(" ", arithmetic.op.sql, " ")
        self.visit_arithmetic_operand(arithmetic.right)

    def visit_arithmetic_operand(self, operand: Expr) -> None:
        if isinstance(operand, BinaryArithmetic):
            self.append_sql("(")
            self.visit(operand)
            self.append_sql(")")
        else:
            self.visit(operand)

    def is_integer_division_emulation_required(self, arithmetic: BinaryArithmetic) -> bool:
        return (
            arithmetic.op is ArithmeticOperator.DIVIDE_PORTABLE
            and not self._dialect.capabilities.supports_integer_division
            and is_integral(expression_type(arithmetic.left))
            and is_integral(expression_type(arithmetic.right))
        )

    # --- Predicates ---

    def visit_comparison(self, comparison: Comparison) -> None:
        match comparison:
            case Comparison(
                lhs=SubqueryExpr(query=QuerySpec() as query), rhs=SqlTuple() as tuple_, op=op
            ):
                self.render_select_tuple_comparison(query, tuple_, op)
            case Comparison(lhs=lhs, op=op, rhs=rhs):
                self.render_comparison(lhs, op, rhs)

    def render_comparison(self, lhs: Expr, operator: ComparisonOperator, rhs: Expr) -> None:
        self.render_comparison_standard(lhs, operator, rhs)

    def render_comparison_standard(
        self, lhs: Expr, operator: ComparisonOperator, rhs: Expr
    ) -> None:
        self.visit(lhs)
        self.append_sql(" ", operator.value, " ")
        self.visit(rhs)

    def render_comparison_emulate_intersect(
        self, lhs: Expr, operator: ComparisonOperator, rhs: Expr
    ) -> None:
        """Render a comparison, emulating distinct-from and row-value forms.

        ``a is distinct from b`` becomes ``not exists (select a intersect select b)``
        since set operations treat nulls as equal. Tuple comparisons are
        expanded element-wise when the dialect lacks row-value comparison.
        """
        if operator in (ComparisonOperator.DISTINCT_FROM, ComparisonOperator.NOT_DISTINCT_FROM):
            if operator is ComparisonOperator.DISTINCT_FROM:
                self.append_sql("not ")
            self.append_sql("exists (select ")
            self._render_select_items(lhs)
            self.append_sql(" ", self._dialect.set_operator_sql(SetOperator.INTERSECT), " select ")
            self._render_select_items(rhs)
            self.append_sql(")")
            return
        if (
            isinstance(lhs, SqlTuple)
            and isinstance(rhs, SqlTuple)
            and not self._dialect.capabilities.supports_row_value_comparison
        ):
            self.emulate_tuple_comparison(lhs.expressions, rhs.expressions, operator, False)
            return
        self.render_comparison_standard(lhs, operator, rhs)

    def _render_select_items(self, expression: Expr) -> None:
        if isinstance(expression, SqlTuple):
            self._render_comma_separated(expression.expressions)
        else:
            self.visit(expression)

    def emulate_tuple_comparison(
        self,
        lhs: Sequence[Expr],
        rhs: Sequence[Expr],
        operator: ComparisonOperator,
        index_optimized: bool,
    ) -> None:
        """Expand a row-value comparison into scalar comparisons.

        Equality becomes a conjunction, inequality a disjunction and ordering
        operators a lexicographic expansion. With ``index_optimized`` the
        expansion of an ordering operator is prefixed by an inclusive range
        bound on the first column, which databases can serve from an index.
        """
        if len(lhs) != len(rhs):
            raise IllegalQueryOperationError(
                f"Can't compare a tuple of {len(lhs)} to a tuple of {len(rhs)} expressions"
            )
        if operator in (ComparisonOperator.EQUAL, ComparisonOperator.NOT_DISTINCT_FROM):
            self._render_elementwise(lhs, rhs, operator, JunctionType.CONJUNCTION)
        elif operator in (ComparisonOperator.NOT_EQUAL, ComparisonOperator.DISTINCT_FROM):
            self._render_elementwise(lhs, rhs, operator, JunctionType.DISJUNCTION)
        else:
            self.append_sql("(")
            if index_optimized and len(lhs) > 1:
                bound = (
                    ComparisonOperator.LESS_THAN_OR_EQUAL
                    if operator.strict is ComparisonOperator.LESS_THAN
                    else ComparisonOperator.GREATER_THAN_OR_EQUAL
                )
                self.render_comparison(lhs[0], bound, rhs[0])
                self.append_sql(" and (")
                self._render_lexicographic(lhs, rhs, operator, 0)
                self.append_sql(")")
            else:
                self._render_lexicographic(lhs, rhs, operator, 0)
            self.append_sql(")")

    def _render_elementwise(
        self,
        lhs: Sequence[Expr],
        rhs: Sequence[Expr],
        operator: ComparisonOperator,
        junction: JunctionType,
    ) -> None:
        self.append_sql("(")
        for i, (left, right) in enumerate(zip(lhs, rhs, strict=True)):
            if i:
                self.append_sql(" ", junction.value, " ")
            self.render_comparison(left, operator, right)
        self.append_sql(")")

    def _render_lexicographic(
        self,
        lhs: Sequence[Expr],
        rhs: Sequence[Expr],
        operator: ComparisonOperator,
        index: int,
    ) -> None:
        if index == len(lhs) - 1:
            self.render_comparison(lhs[index], operator, rhs[index])
            return
        self.render_comparison(lhs[index], operator.strict, rhs[index])
        self.append_sql(" or ")
        self.render_comparison(lhs[index], ComparisonOperator.EQUAL, rhs[index])
        self.append_sql(" and (")
        self._render_lexicographic(lhs, rhs, operator, index + 1)
        self.append_sql(")")

    def render_select_tuple_comparison(
        self, query_spec: QuerySpec, tuple_: SqlTuple, operator: ComparisonOperator
    ) -> None:
        if self._dialect.capabilities.supports_row_value_comparison:
            self.visit_subquery(query_spec)
            self.append_sql(" ", operator.value, " ")
            self.visit(tuple_)
        else:
            self.emulate_select_tuple_comparison(query_spec, tuple_.expressions, operator, False)

    def emulate_select_tuple_comparison(
        self,
        query_spec: QuerySpec,
        rhs: Sequence[Expr],
        operator: ComparisonOperator,
        index_optimized: bool,
    ) -> None:
        """Render ``(select a, b from t where p) op (x, y)`` as an EXISTS query.

        The tuple comparison is moved into the subquery's restriction, or its
        HAVING clause when the subquery is grouped.
        """
        lhs = [selection.expr for selection in query_spec.select_clause.selections]
        grouped = bool(query_spec.group_by) or self.has_where(query_spec.having)
        self.append_sql("exists (select 1")
        self.visit_from_clause(query_spec.from_)
        if grouped:
            self.visit_where_clause(query_spec.where)
            self.visit_group_by_clause(query_spec.group_by)
            clause, keyword, existing = Clause.HAVING, " having ", query_spec.having
        else:
            clause, keyword, existing = Clause.WHERE, " where ", query_spec.where
        with self._clause_stack.push(clause):
            self.append_sql(keyword)
            if self.has_where(existing):
                self.append_sql("(")
                self.visit(existing)
                self.append_sql(") and ")
            self.emulate_tuple_comparison(lhs, rhs, operator, index_optimized)
        self.append_sql(")")

    def visit_junction(self, junction: Junction) -> None:
        if not junction.predicates:
            self.append_sql("1=1" if junction.type is JunctionType.CONJUNCTION else "1=0")
            return
        for i, predicate in enumerate(junction.predicates):
            if i:
                self.append_sql(" ", junction.type.value, " ")
            if isinstance(predicate, Junction):
                self.append_sql("(")
                self.visit(predicate)
                self.append_sql(")")
            else:
                self.visit(predicate)

    def visit_in_list_predicate(self, predicate: InListPredicate) -> None:
        if not predicate.values:
            self.append_sql("1=1" if predicate.negated else "1=0")
            return
        self.visit(predicate.expr)
        self.append_sql(" not in (" if predicate.negated else " in (")
        self._render_comma_separated(predicate.values)
        self.append_sql(")")

    def visit_in_array_predicate(self, predicate: InArrayPredicate) -> None:
        self.visit(predicate.test_expression)
        self.append_sql(" = any(")
        self.visit(predicate.array_parameter)
        self.append_sql(")")

    def visit_like_predicate(self, predicate: LikePredicate) -> None:
        self.render_like(
            predicate, lambda: self.visit(predicate.pattern), predicate.escape_character
        )

    def render_like(
        self, predicate: LikePredicate, write_pattern: WriteFunc, escape: Expr | None
    ) -> None:
        """Render a LIKE predicate with the pattern written by ``write_pattern``."""
        if escape is not None and not self._dialect.capabilities.supports_like_escape:
            raise UnsupportedOperationError(
                f"LIKE ... ESCAPE is not supported by dialect '{self._dialect.name}'"
            )
        if predicate.case_sensitive or self._dialect.capabilities.supports_ilike:
            self.visit(predicate.match)
            if predicate.negated:
                self.append_sql(" not")
            self.append_sql(" like " if predicate.case_sensitive else " ilike ")
            write_pattern()
        else:
            self.render_case_insensitive_like_emulation(
                predicate.match, write_pattern, predicate.negated
            )
        if escape is not None:
            self.append_sql(" escape ")
            self.visit(escape)

    def render_case_insensitive_like_emulation(
        self, match: Expr, write_pattern: WriteFunc, negated: bool
    ) -> None:
        lower = self._dialect.lower_function
        self.append_sql(lower, "(")
        self.visit(match)
        self.append_sql(")")
        self.append_sql(" not like " if negated else " like ")
        self.append_sql(lower, "(")
        write_pattern()
        self.append_sql(")")
