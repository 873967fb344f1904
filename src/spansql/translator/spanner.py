"""Cloud Spanner rendering: emulates the standard constructs Spanner rejects."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from spansql.ast.nodes import (
    AnySubquery,
    BinaryArithmetic,
    ComparisonOperator,
    ConflictClause,
    DeleteStatement,
    DerivedTableReference,
    EverySubquery,
    Expr,
    FollowOnLocking,
    InArrayPredicate,
    InsertStatement,
    LikePredicate,
    Literal,
    LockStrategy,
    NamedTableReference,
    QueryGroup,
    QueryPart,
    QueryPartTableReference,
    QuerySpec,
    SelectClause,
    SqlTuple,
    Summarization,
    TableReference,
    UpdateStatement,
)
from spansql.errors import (
    IllegalQueryOperationError,
    UnresolvableLiteralError,
    UnsupportedOperationError,
)
from spansql.translator.base import SqlAstTranslator
from spansql.translator.clause import Clause
from spansql.translator.like import rewrite_like_pattern


class SpannerSqlAstTranslator(SqlAstTranslator):
    """Translator for Cloud Spanner (GoogleSQL dialect)."""

    _correlated = False

    @contextmanager
    def _correlated_scope(self, correlated: bool = True) -> Iterator[None]:
        """Mark whether rendering happens directly inside an ``unnest(array(...))``."""
        previous = self._correlated
        self._correlated = correlated
        try:
            yield
        finally:
            self._correlated = previous

    # --- Locking and paging ---

    def determine_locking_strategy(
        self, query_spec: QuerySpec, follow_on_locking: FollowOnLocking
    ) -> LockStrategy:
        # Spanner serializes read-write transactions itself.
        return LockStrategy.NONE

    def visit_offset_fetch_clause(self, query_part: QueryPart) -> None:
        self.render_limit_offset_clause(query_part)

    # --- Comparisons ---

    def render_comparison(self, lhs: Expr, operator: ComparisonOperator, rhs: Expr) -> None:
        match operator, rhs:
            case ComparisonOperator.EQUAL, AnySubquery(subquery=subquery):
                self.visit(lhs)
                self.append_sql(" in ")
                self.visit_subquery(subquery)
            case ComparisonOperator.NOT_EQUAL, EverySubquery(subquery=subquery):
                self.visit(lhs)
                self.append_sql(" not in ")
                self.visit_subquery(subquery)
            case _:
                self.render_comparison_emulate_intersect(lhs, operator, rhs)

    def render_select_tuple_comparison(
        self, query_spec: QuerySpec, tuple_: SqlTuple, operator: ComparisonOperator
    ) -> None:
        self.emulate_select_tuple_comparison(query_spec, tuple_.expressions, operator, True)

    # --- Grouping and selection ---

    def render_partition_item(self, expression: Expr) -> None:
        match expression:
            case Literal():
                # Any constant groups all rows together.
                self.append_sql("'0' || '0'")
            case Summarization():
                raise UnsupportedOperationError("Summarization is not supported by Spanner")
            case _:
                super().render_partition_item(expression)

    def visit_select_clause(self, select_clause: SelectClause) -> None:
        with self.clause_stack.push(Clause.SELECT):
            self.append_sql("select ")
            if self._correlated:
                self.append_sql("as struct ")
            if select_clause.distinct:
                self.append_sql("distinct ")
            with self._correlated_scope(False):
                self.visit_sql_selections(select_clause)

    def visit_query_spec_clauses(self, query_spec: QuerySpec) -> None:
        # Subqueries nested below the unnested query render as plain selects.
        with self._correlated_scope(False):
            super().visit_query_spec_clauses(query_spec)

    def visit_query_group(self, query_group: QueryGroup) -> None:
        # Every part of an unnested set operation is a struct; its trailing clauses are not.
        self.render_query_group_parts(query_group)
        with self._correlated_scope(False):
            self.visit_order_by(query_group.order_by)
            self.visit_offset_fetch_clause(query_group)

    # --- Derived tables ---

    def render_derived_table_reference(self, table_reference: DerivedTableReference) -> None:
        if not table_reference.lateral:
            self.visit_derived_table_reference(table_reference)
            return
        # unnest(array(select as struct ...)) evaluates per outer row like LATERAL.
        with self._correlated_scope():
            self.append_sql("unnest(array")
            self.visit_derived_table_reference(table_reference)
            self.append_sql(")")
        super().render_table_reference_identification_variable(table_reference)

    def render_table_reference_identification_variable(
        self, table_reference: TableReference
    ) -> None:
        if (
            self._correlated
            and isinstance(table_reference, DerivedTableReference)
            and table_reference.lateral
        ):
            return
        super().render_table_reference_identification_variable(table_reference)

    def visit_query_part_table_reference(self, table_reference: QueryPartTableReference) -> None:
        self.emulate_query_part_table_reference_column_aliasing(table_reference)

    # --- DML ---

    def render_dml_target_table_expression(self, table_reference: NamedTableReference) -> None:
        super().render_dml_target_table_expression(table_reference)
        if self.clause_stack.current is not Clause.INSERT:
            self.render_table_reference_identification_variable(table_reference)

    def visit_delete_statement_only(self, statement: DeleteStatement) -> None:
        if self.has_where(statement.restriction):
            super().visit_delete_statement_only(statement)
            return
        # Spanner requires a WHERE clause on every DELETE.
        self.render_delete_clause(statement)
        self.append_sql(" where true")
        self.visit_returning_columns(statement.returning)

    def visit_update_statement_only(self, statement: UpdateStatement) -> None:
        if self.has_where(statement.restriction):
            super().visit_update_statement_only(statement)
            return
        self.render_update_clause(statement)
        self.render_set_clause(statement.assignments)
        self.append_sql(" where true")
        self.visit_returning_columns(statement.returning)

    def visit_insert_statement_only(self, statement: InsertStatement) -> None:
        conflict_clause = statement.conflict_clause
        if conflict_clause is None:
            super().visit_insert_statement_only(statement)
            return
        self.visit_conflict_clause(conflict_clause)
        with self.clause_stack.push(Clause.INSERT):
            if conflict_clause.do_update:
                self.append_sql("insert or update into ")
            else:
                self.append_sql("insert or ignore into ")
            self.render_dml_target_table_expression(statement.target_table)
            self.render_insert_target_columns(statement.target_columns)
        self.visit_insert_source(statement)
        self.visit_returning_columns(statement.returning)

    def visit_conflict_clause(self, conflict_clause: ConflictClause | None) -> None:
        """Check that the conflict clause maps onto Spanner's primary-key upsert."""
        if conflict_clause is None:
            return
        if conflict_clause.constraint_name is not None:
            raise IllegalQueryOperationError(
                "Insert conflict clauses naming a constraint are not supported by Spanner"
            )
        if conflict_clause.constraint_columns:
            raise IllegalQueryOperationError(
                "Insert conflict clauses naming constraint columns are not supported by Spanner"
            )
        if self.has_where(conflict_clause.predicate):
            raise IllegalQueryOperationError(
                "Insert conflict 'do update' clause with predicate is not supported by Spanner"
            )

    # --- Predicates ---

    def visit_in_array_predicate(self, predicate: InArrayPredicate) -> None:
        self.visit(predicate.test_expression)
        self.append_sql(" in unnest(")
        self.visit(predicate.array_parameter)
        self.append_sql(")")

    def visit_like_predicate(self, predicate: LikePredicate) -> None:
        if predicate.escape_character is None:
            super().visit_like_predicate(predicate)
            return
        escape = self.resolve_literal_value(predicate.escape_character)
        if not isinstance(escape, str) or len(escape) != 1:
            raise UnresolvableLiteralError(
                f"LIKE escape must resolve to a single character, got {escape!r}"
            )
        if escape == "\\":
            # Backslash is Spanner's only escape and needs no ESCAPE clause.
            self.render_like(predicate, lambda: self.visit(predicate.pattern), None)
            return
        pattern = self.resolve_literal_value(predicate.pattern)
        if not isinstance(pattern, str):
            raise UnresolvableLiteralError(
                f"LIKE pattern with a custom escape must be a string literal, got {pattern!r}"
            )
        rewritten = rewrite_like_pattern(pattern, escape)
        self.render_like(predicate, lambda: self.render_literal(rewritten), None)

    # --- Arithmetic ---

    def visit_binary_arithmetic(self, arithmetic: BinaryArithmetic) -> None:
        if not self.is_integer_division_emulation_required(arithmetic):
            super().visit_binary_arithmetic(arithmetic)
            return
        self.append_sql("div(")
        self.visit(arithmetic.left)
        self.append_sql(", ")
        self.visit(arithmetic.right)
        self.append_sql(")")
