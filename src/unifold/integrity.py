from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .table import FoldingTable, Replacement


@dataclass(frozen=True)
class VerifyResult:
    ok: bool
    errors: List[str]


@dataclass(frozen=True)
class TableDiff:
    missing: Dict[int, Replacement] = field(default_factory=dict)  # in expected only
    extra: Dict[int, Replacement] = field(default_factory=dict)  # in actual only
    changed: Dict[int, Tuple[Replacement, Replacement]] = field(default_factory=dict)  # (actual, expected)

    @property
    def empty(self) -> bool:
        return not (self.missing or self.extra or self.changed)


def _fmt(seq: Replacement) -> str:
    return " ".join(f"{cp:04X}" for cp in seq)


def unstable_targets(table: FoldingTable) -> List[Tuple[int, int]]:
    """(key, target) pairs where a folded code point would fold again.

    Folding is idempotent exactly when this list is empty. Targets whose own
    entry maps to themselves do not change on a second pass and are left to
    the identity-entry check.
    """

    out: List[Tuple[int, int]] = []
    for key, repl in table.items():
        for cp in repl:
            if cp in table and table[cp] != (cp,):
                out.append((key, cp))
    return out


def check_table(table: FoldingTable) -> VerifyResult:
    errors: List[str] = []

    for key, repl in table.items():
        if repl == (key,):
            errors.append(f"identity entry: U+{key:04X}")

    for key, cp in unstable_targets(table):
        errors.append(f"unstable target: U+{key:04X} -> {_fmt(table[key])} (U+{cp:04X} -> {_fmt(table[cp])})")

    return VerifyResult(ok=(len(errors) == 0), errors=errors)


def diff_tables(actual: FoldingTable, expected: FoldingTable) -> TableDiff:
    missing = {k: v for k, v in expected.items() if k not in actual}
    extra = {k: v for k, v in actual.items() if k not in expected}
    changed = {
        k: (v, expected[k])
        for k, v in actual.items()
        if k in expected and expected[k] != v
    }
    return TableDiff(missing=missing, extra=extra, changed=changed)


def check_conformance(actual: FoldingTable, expected: FoldingTable) -> VerifyResult:
    """Compare a table against a canonical one (typically CaseFolding.txt)."""

    if actual.fingerprint == expected.fingerprint:
        return VerifyResult(True, [])

    d = diff_tables(actual, expected)
    errors: List[str] = []
    for k, v in sorted(d.missing.items()):
        errors.append(f"missing: U+{k:04X} -> {_fmt(v)}")
    for k, v in sorted(d.extra.items()):
        errors.append(f"extra: U+{k:04X} -> {_fmt(v)}")
    for k, (got, want) in sorted(d.changed.items()):
        errors.append(f"changed: U+{k:04X} -> {_fmt(got)} (expected {_fmt(want)})")
    return VerifyResult(ok=(len(errors) == 0), errors=errors)
