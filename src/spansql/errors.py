"""Exception hierarchy for SQL AST translation."""

from __future__ import annotations


class TranslationError(Exception):
    """Base exception for all translation failures.

    Translation is a pure function over an already validated AST, so every
    failure means the statement asks for something the target dialect cannot
    express. Callers abandon the statement; nothing is retried.
    """


class IllegalQueryOperationError(TranslationError):
    """The query, as expressed, cannot be represented in the target dialect."""


class UnresolvableLiteralError(IllegalQueryOperationError):
    """An expression that must be a literal at translation time is not one."""


class UnsupportedOperationError(TranslationError):
    """A structurally impossible request, such as ROLLUP emulation."""


class ConfigurationError(UnsupportedOperationError):
    """A required dialect capability object is missing."""
