"""Unicode scalar values.

A Python `str` is a sequence of code points, so iterating it never splits a
character across storage units. It can, however, hold lone surrogate code
points (U+D800..U+DFFF), which are not scalar values. The helpers here make
that case explicit instead of leaving it to the caller.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from .errors import InvalidInputType, MalformedText, OutOfRangeCodePoint

MAX_CODE_POINT = 0x10FFFF
SURROGATE_MIN = 0xD800
SURROGATE_MAX = 0xDFFF

STRICT = "strict"
PASSTHROUGH = "passthrough"
MALFORMED_POLICIES = (STRICT, PASSTHROUGH)

_SURROGATE_RE = re.compile("[\ud800-\udfff]")


def is_scalar_value(cp: object) -> bool:
    if not isinstance(cp, int) or isinstance(cp, bool):
        return False
    return 0 <= cp <= MAX_CODE_POINT and not (SURROGATE_MIN <= cp <= SURROGATE_MAX)


def require_code_point(cp: object) -> int:
    """Return `cp` if it is a scalar value, else raise.

    `bool` is rejected even though it subclasses `int`.
    """

    if not isinstance(cp, int) or isinstance(cp, bool):
        raise InvalidInputType("Code point must be an integer")
    if not is_scalar_value(cp):
        raise OutOfRangeCodePoint(cp)
    return cp


def require_text(s: object) -> str:
    if not isinstance(s, str):
        raise InvalidInputType("Input must be a string")
    return s


def first_surrogate(s: str) -> Optional[int]:
    m = _SURROGATE_RE.search(s)
    return None if m is None else m.start()


def check_well_formed(s: str) -> None:
    """Raise `MalformedText` at the first lone surrogate in `s`."""

    pos = first_surrogate(s)
    if pos is not None:
        raise MalformedText(pos, ord(s[pos]))


def iter_scalars(s: str, malformed: str = STRICT) -> Iterator[int]:
    """Iterate the code points of `s`, one per character.

    Under the strict policy the whole string is checked before the iterator
    is returned, so a failure never leaves a partial result behind.
    """

    if malformed == STRICT:
        check_well_formed(s)
    return map(ord, s)
