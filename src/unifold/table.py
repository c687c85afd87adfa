"""Folding table: an immutable map from a scalar value to its case fold.

A table holds only the `C` (common) and `F` (full) rows of CaseFolding.txt.
Code points without an entry fold to themselves.

Prepared tables are exchanged as JSON (format v1):

    {"v": 1, "unicode_version": "16.0.0", "source": "...",
     "fingerprint": "sha256:...", "entries": [[65, [97]], [223, [115, 115]]]}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from functools import cached_property
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from jsonschema import Draft202012Validator
from referencing import Registry, Resource

from .canon import fingerprint_entries
from .errors import TableError
from .scalars import is_scalar_value, require_code_point

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
TABLE_SCHEMA_ID = "unifold:folding-table-v1"
ENTRY_SCHEMA_ID = "unifold:folding-entry-v1"

Replacement = Tuple[int, ...]


class FoldingTable(Mapping):
    """Read-only mapping `code point -> tuple of replacement code points`.

    Every entry is checked for shape (scalar key, non-empty replacement of
    scalar values) and stored as a tuple, whichever constructor is used.
    Whether the content matches Unicode is the business of whoever prepared
    the pairs.
    """

    def __init__(
        self,
        entries: Mapping[int, Iterable[int]],
        *,
        unicode_version: Optional[str] = None,
        source: Optional[str] = None,
    ) -> None:
        checked = {key: _replacement(key, value) for key, value in entries.items()}
        # Keys are kept sorted so iteration and fingerprints are stable.
        self._map: Dict[int, Replacement] = {k: checked[k] for k in sorted(checked)}
        self.unicode_version = unicode_version
        self.source = source

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[Tuple[int, Iterable[int]]],
        *,
        unicode_version: Optional[str] = None,
        source: Optional[str] = None,
    ) -> "FoldingTable":
        """Bulk-load a table from prepared `(code_point, replacement)` pairs."""

        entries: Dict[int, Replacement] = {}
        for key, value in pairs:
            repl = _replacement(key, value)
            if key in entries:
                raise TableError(f"duplicate key: U+{key:04X}")
            entries[key] = repl
        return cls(entries, unicode_version=unicode_version, source=source)

    # ---- Mapping protocol ----

    def __getitem__(self, key: int) -> Replacement:
        return self._map[key]

    def __iter__(self) -> Iterator[int]:
        return iter(self._map)

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __repr__(self) -> str:
        return f"FoldingTable({len(self)} entries, unicode_version={self.unicode_version!r})"

    # ---- Lookup ----

    def lookup(self, code_point: int) -> Optional[Replacement]:
        """Replacement for `code_point`, or None when it folds to itself."""

        return self._map.get(require_code_point(code_point))

    @cached_property
    def translation(self) -> Mapping[int, str]:
        """Read-only `str.translate` table: code point -> folded text."""

        return MappingProxyType({k: "".join(map(chr, v)) for k, v in self._map.items()})

    @cached_property
    def fingerprint(self) -> str:
        return fingerprint_entries(self._map.items())

    # ---- JSON ----

    def to_json(self) -> Dict[str, Any]:
        return {
            "v": FORMAT_VERSION,
            "unicode_version": self.unicode_version,
            "source": self.source,
            "fingerprint": self.fingerprint,
            "entries": [[k, list(v)] for k, v in self._map.items()],
        }

    @classmethod
    def from_json(cls, obj: Any) -> "FoldingTable":
        validate_table_json(obj)
        table = cls.from_pairs(
            ((k, v) for k, v in obj["entries"]),
            unicode_version=obj.get("unicode_version"),
            source=obj.get("source"),
        )
        if table.fingerprint != obj["fingerprint"]:
            raise TableError(
                "fingerprint mismatch\n"
                f"  recorded: {obj['fingerprint']}\n"
                f"  actual:   {table.fingerprint}"
            )
        return table

    def save(self, path: Path) -> Path:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        txt = json.dumps(self.to_json(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
        p.write_text(txt + "\n", encoding="utf-8")
        logger.debug("wrote %d entries to %s", len(self), p)
        return p

    @classmethod
    def load(cls, path: Path) -> "FoldingTable":
        p = Path(path)
        try:
            obj = json.loads(p.read_text(encoding="utf-8"))
        except OSError as e:
            raise TableError(f"{p}: cannot read: {e}") from e
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise TableError(f"{p}: not valid JSON: {e}") from e
        table = cls.from_json(obj)
        logger.debug("loaded %d entries from %s (%s)", len(table), p, table.fingerprint)
        return table


# ---- Entry checks ----

def _replacement(key: Any, value: Iterable[int]) -> Replacement:
    if not is_scalar_value(key):
        raise TableError(f"invalid key: {key!r}")
    repl = tuple(value)
    if not repl:
        raise TableError(f"empty replacement for U+{key:04X}")
    for cp in repl:
        if not is_scalar_value(cp):
            raise TableError(f"invalid replacement value {cp!r} for U+{key:04X}")
    return repl


# ---- Schema ----

def _load_schema(name: str) -> Any:
    ref = resources.files(__package__).joinpath("schemas").joinpath(name)
    return json.loads(ref.read_text(encoding="utf-8"))


def _schema_errors(obj: Any) -> List[str]:
    table_schema = _load_schema("folding-table-v1.schema.json")
    entry_schema = _load_schema("folding-entry-v1.schema.json")

    reg = Registry().with_resources([
        (TABLE_SCHEMA_ID, Resource.from_contents(table_schema)),
        (ENTRY_SCHEMA_ID, Resource.from_contents(entry_schema)),
    ])
    v = Draft202012Validator(table_schema, registry=reg)

    errs = sorted(v.iter_errors(obj), key=lambda e: [str(p) for p in e.path])
    return [f"{list(e.path)}: {e.message}" for e in errs]


def validate_table_json(obj: Any) -> None:
    """Raise `TableError` if `obj` is not a v1 table document."""

    errs = _schema_errors(obj)
    if errs:
        raise TableError("; ".join(errs[:5]))
