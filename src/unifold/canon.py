"""Canonical bytes + deterministic hashing for folding tables.

  - `canon_json_bytes`: deterministic JSON-to-bytes encoding.
  - `fingerprint_entries`: stable, self-describing digest of a table's entries.

Two tables with the same entries share a fingerprint no matter where they
were prepared or which metadata they carry.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Iterable, Sequence, Tuple

DIGEST_PREFIX = "sha256"


def canon_json_bytes(obj: Any) -> bytes:
    """UTF-8 JSON with sorted keys and no whitespace.

    Table entries are nested int lists, so equal entries always encode to the
    same bytes and the fingerprint does not depend on how a file was written.
    """

    s = json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def sha256_prefixed(data: bytes, prefix: str = DIGEST_PREFIX) -> str:
    """Format: "<prefix>:<64-hex>"."""

    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("sha256_prefixed expects bytes-like input")
    return f"{prefix}:{hashlib.sha256(bytes(data)).hexdigest()}"


def fingerprint_entries(entries: Iterable[Tuple[int, Sequence[int]]]) -> str:
    """Digest of `[[key, [value, ...]], ...]`.

    Callers pass entries sorted by key; the digest is order-sensitive.
    """

    return sha256_prefixed(canon_json_bytes([[k, list(v)] for k, v in entries]))
