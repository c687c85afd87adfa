"""Offline preparation of folding tables from the Unicode Character Database.

Two sources produce the same kind of table:

  - CaseFolding.txt, read from disk or fetched over HTTP;
  - the running interpreter's own Unicode database (`str.casefold`, which
    applies exactly the `C` + `F` rows of the CaseFolding.txt it was built
    from).

Nothing here runs when text is folded; these helpers exist to build and
check the table the engine is given.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import httpx

from .errors import UcdFetchError, UcdParseError
from .scalars import MAX_CODE_POINT, SURROGATE_MAX, SURROGATE_MIN
from .table import FoldingTable

logger = logging.getLogger(__name__)

CASE_FOLDING_URL = "https://www.unicode.org/Public/UCD/latest/ucd/CaseFolding.txt"

# C: common to simple and full folding. F: full folding only (may expand).
# S (simple-only) and T (Turkic) rows are never applied.
KEPT_STATUSES = frozenset({"C", "F"})

_VERSION_RE = re.compile(r"^#\s*CaseFolding-(\d+\.\d+\.\d+)\.txt")

Pair = Tuple[int, Tuple[int, ...]]


def _hex(field: str, lineno: int, what: str) -> int:
    try:
        return int(field, 16)
    except ValueError as e:
        raise UcdParseError(lineno, f"bad {what} {field!r}") from e


def parse_case_folding(lines: Iterable[str]) -> List[Pair]:
    """Parse CaseFolding.txt rows into `(code_point, mapping)` pairs.

    Row format: `<code>; <status>; <mapping>; # <name>`.
    """

    foldings: Dict[int, Tuple[int, ...]] = {}
    for lineno, line in enumerate(lines, start=1):
        if line.startswith("#") or not line.strip():
            continue

        fields = [f.strip() for f in line.split(";")]
        if len(fields) < 3 or not fields[2]:
            continue
        code_str, status, mapping = fields[0], fields[1], fields[2]

        if status not in KEPT_STATUSES:
            continue
        code_point = _hex(code_str, lineno, "code point")
        foldings[code_point] = tuple(_hex(s, lineno, "mapping") for s in mapping.split(" "))

    return list(foldings.items())


def unicode_version_of(lines: Iterable[str]) -> Optional[str]:
    """Version from the `# CaseFolding-X.Y.Z.txt` header, if present."""

    for line in lines:
        m = _VERSION_RE.match(line)
        if m:
            return m.group(1)
        if line.strip() and not line.startswith("#"):
            break
    return None


def table_from_text(text: str, *, source: Optional[str] = None) -> FoldingTable:
    lines = text.splitlines()
    pairs = parse_case_folding(lines)
    version = unicode_version_of(lines)
    logger.info("parsed %d foldings (Unicode %s) from %s", len(pairs), version or "unknown", source or "text")
    return FoldingTable.from_pairs(pairs, unicode_version=version, source=source)


def read_case_folding(path: Path) -> FoldingTable:
    p = Path(path)
    return table_from_text(p.read_text(encoding="utf-8"), source=p.as_posix())


def fetch_case_folding(
    url: str = CASE_FOLDING_URL,
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = 30.0,
) -> FoldingTable:
    """Download CaseFolding.txt and parse it.

    Raises:
        UcdFetchError: on a non-2xx response or a transport failure.
    """

    logger.info("fetching Unicode case folding data from %s", url)
    own_client = client is None
    if client is None:
        client = httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        response = client.get(url)
    except httpx.HTTPError as e:
        raise UcdFetchError(f"Failed to fetch data: {e}") from e
    finally:
        if own_client:
            client.close()

    if not response.is_success:
        raise UcdFetchError(f"Failed to fetch data: {response.status_code} {response.reason_phrase}")
    return table_from_text(response.text, source=url)


def load_source(source: str, **kwargs) -> FoldingTable:
    """`source` is an http(s) URL or a local path to CaseFolding.txt."""

    if source.startswith(("http://", "https://")):
        return fetch_case_folding(source, **kwargs)
    return read_case_folding(Path(source))


def iter_scalar_values() -> Iterator[int]:
    yield from range(SURROGATE_MIN)
    yield from range(SURROGATE_MAX + 1, MAX_CODE_POINT + 1)


def derive_pairs() -> List[Pair]:
    """`C` + `F` pairs from the interpreter's Unicode database."""

    pairs: List[Pair] = []
    for cp in iter_scalar_values():
        ch = chr(cp)
        folded = ch.casefold()
        if folded != ch:
            pairs.append((cp, tuple(map(ord, folded))))
    return pairs


def derive_table() -> FoldingTable:
    pairs = derive_pairs()
    logger.debug("derived %d foldings from unicodedata %s", len(pairs), unicodedata.unidata_version)
    return FoldingTable.from_pairs(
        pairs,
        unicode_version=unicodedata.unidata_version,
        source="unicodedata",
    )
