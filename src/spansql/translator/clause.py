"""Clause context tracking for the translator."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import StrEnum


class Clause(StrEnum):
    SELECT = "select"
    FROM = "from"
    WHERE = "where"
    GROUP = "group"
    HAVING = "having"
    ORDER = "order"
    OFFSET = "offset"
    FETCH = "fetch"
    FOR_UPDATE = "for_update"
    PARTITION = "partition"
    INSERT = "insert"
    VALUES = "values"
    CONFLICT = "conflict"
    UPDATE = "update"
    SET = "set"
    DELETE = "delete"
    RETURNING = "returning"


class ClauseStack:
    """Stack of the clauses currently being rendered, innermost last."""

    def __init__(self) -> None:
        self._clauses: list[Clause] = []

    @property
    def current(self) -> Clause | None:
        return self._clauses[-1] if self._clauses else None

    def __contains__(self, clause: Clause) -> bool:
        return clause in self._clauses

    def __len__(self) -> int:
        return len(self._clauses)

    @contextmanager
    def push(self, clause: Clause) -> Iterator[None]:
        """Enter ``clause`` for the duration of the block, popping it on any exit."""
        self._clauses.append(clause)
        try:
            yield
        finally:
            self._clauses.pop()
