"""Error taxonomy.

Every error derives from `UnifoldError`. Contract violations at the call
boundary also derive from the matching builtin (`TypeError` / `ValueError`)
so callers can catch either.
"""

from __future__ import annotations


class UnifoldError(Exception):
    pass


class InvalidInputType(UnifoldError, TypeError):
    """Non-text passed where text is required, or non-int where a code point is."""


class OutOfRangeCodePoint(UnifoldError, ValueError):
    def __init__(self, value: int) -> None:
        shown = f"{value:#x}" if value >= 0 else str(value)
        super().__init__(f"not a Unicode scalar value: {shown}")
        self.value = value


class MalformedText(UnifoldError, ValueError):
    """Text contains a lone surrogate code point."""

    def __init__(self, offset: int, code_point: int) -> None:
        super().__init__(f"lone surrogate U+{code_point:04X} at offset {offset}")
        self.offset = offset
        self.code_point = code_point


class TableError(UnifoldError):
    pass


class UcdParseError(UnifoldError, ValueError):
    def __init__(self, lineno: int, message: str) -> None:
        super().__init__(f"line {lineno}: {message}")
        self.lineno = lineno


class UcdFetchError(UnifoldError):
    pass
