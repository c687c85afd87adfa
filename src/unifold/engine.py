"""Folding engine: applies a `FoldingTable` to text.

Every operation is a pure function of its arguments and an immutable table,
so one engine may be shared by any number of threads without locking. The
only lock in this module guards the one-time build of the default table.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterator, Optional, Tuple

from .config import Settings
from .scalars import (
    MALFORMED_POLICIES,
    STRICT,
    check_well_formed,
    iter_scalars,
    require_text,
)
from .table import FoldingTable
from .ucd import derive_table

logger = logging.getLogger(__name__)


class FoldingEngine:
    def __init__(self, table: FoldingTable, *, malformed: str = STRICT) -> None:
        if malformed not in MALFORMED_POLICIES:
            raise ValueError(f"unknown malformed-text policy: {malformed!r}")
        self.table = table
        self.malformed = malformed

    def fold(self, text: str) -> str:
        """Return the full case fold of `text`.

        Each scalar value is replaced by its table entry (one to three scalar
        values) or kept as is. Lone surrogates raise `MalformedText` under the
        strict policy and are copied through under `passthrough`.
        """

        s = require_text(text)
        if self.malformed == STRICT:
            check_well_formed(s)
        return s.translate(self.table.translation)

    def iter_folded(self, text: str) -> Iterator[int]:
        """Lazily yield the code points of `fold(text)`.

        Input is validated before the iterator is returned.
        """

        s = require_text(text)
        return self._expand(iter_scalars(s, self.malformed))

    def _expand(self, scalars: Iterator[int]) -> Iterator[int]:
        m = self.table
        for c in scalars:
            repl = m.get(c)
            if repl is None:
                yield c
            else:
                yield from repl

    def fold_equals(self, a: str, b: str) -> bool:
        fa = self.fold(a)
        fb = self.fold(b)
        return fa == fb

    def lookup_folding(self, code_point: int) -> Optional[Tuple[int, ...]]:
        return self.table.lookup(code_point)


# ---- Process-wide default ----

_lock = threading.Lock()
_default_engine: Optional[FoldingEngine] = None


def _build_default(settings: Settings) -> FoldingEngine:
    if settings.table_path is not None:
        table = FoldingTable.load(settings.table_path)
    else:
        table = derive_table()
    logger.info(
        "default folding table: %d entries, Unicode %s, %s",
        len(table),
        table.unicode_version,
        table.fingerprint,
    )
    return FoldingEngine(table, malformed=settings.malformed)


def default_engine() -> FoldingEngine:
    """The shared engine, built on first use from `Settings.from_env()`."""

    global _default_engine
    engine = _default_engine
    if engine is None:
        with _lock:
            if _default_engine is None:
                _default_engine = _build_default(Settings.from_env())
            engine = _default_engine
    return engine


def reset_default_engine() -> None:
    """Drop the shared engine; the next call rebuilds it from the environment."""

    global _default_engine
    with _lock:
        _default_engine = None


def default_table() -> FoldingTable:
    return default_engine().table


def fold(text: str) -> str:
    return default_engine().fold(text)


def fold_equals(a: str, b: str) -> bool:
    return default_engine().fold_equals(a, b)


def lookup_folding(code_point: int) -> Optional[Tuple[int, ...]]:
    return default_engine().lookup_folding(code_point)


def iter_folded(text: str) -> Iterator[int]:
    return default_engine().iter_folded(text)
