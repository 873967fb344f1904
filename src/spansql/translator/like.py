"""LIKE pattern rewriting for databases that only know the backslash escape."""

from __future__ import annotations

_WILDCARDS = "%_"


def rewrite_like_pattern(pattern: str, escape: str) -> str:
    """Rewrite ``pattern`` written for ``escape`` into backslash-escape form.

    The rewritten pattern matches exactly the strings the original pattern
    matched under ``escape``. An escape followed by a wildcard or by itself
    becomes the backslash-escaped form of that character; a literal
    backslash is doubled.
    """
    if len(escape) != 1:
        raise ValueError(f"LIKE escape must be a single character, got {escape!r}")
    if escape == "\\":
        return pattern

    out: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == escape and i + 1 < len(pattern) and pattern[i + 1] in _WILDCARDS + escape:
            escaped = pattern[i + 1]
            out.append(f"\\{escaped}" if escaped in _WILDCARDS else escaped)
            i += 2
            continue
        out.append("\\\\" if ch == "\\" else ch)
        i += 1
    return "".join(out)
