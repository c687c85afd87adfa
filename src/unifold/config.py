from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .scalars import MALFORMED_POLICIES, STRICT

ENV_TABLE = "UNIFOLD_TABLE"
ENV_MALFORMED = "UNIFOLD_MALFORMED"


def _policy(v: Optional[str]) -> str:
    """
    Lone-surrogate policy for the default engine.

    Unknown values => strict.
    """
    if v is None:
        return STRICT
    s = v.strip().lower()
    return s if s in MALFORMED_POLICIES else STRICT


def _path(v: Optional[str]) -> Optional[Path]:
    if v is None or not v.strip():
        return None
    return Path(v.strip()).expanduser()


@dataclass(frozen=True)
class Settings:
    """
    Controls:
      - UNIFOLD_TABLE: prepared table JSON; unset => derive from unicodedata
      - UNIFOLD_MALFORMED: strict | passthrough
    """

    table_path: Optional[Path] = None
    malformed: str = STRICT

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return Settings(
            table_path=_path(env.get(ENV_TABLE)),
            malformed=_policy(env.get(ENV_MALFORMED)),
        )
