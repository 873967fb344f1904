"""SQL dialects a statement can be translated to."""

# Import dialects to trigger registration
import spansql.dialect.postgres as _postgres  # noqa: F401
import spansql.dialect.spanner as _spanner  # noqa: F401
from spansql.dialect.base import Dialect, DialectCapabilities
from spansql.dialect.registry import DialectRegistry, UnsupportedDialectError

__all__ = [
    "Dialect",
    "DialectCapabilities",
    "DialectRegistry",
    "UnsupportedDialectError",
]
