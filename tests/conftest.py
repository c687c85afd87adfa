from __future__ import annotations

from pathlib import Path

import pytest

from unifold.table import FoldingTable
from unifold.ucd import read_case_folding

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture
def excerpt_path() -> Path:
    return DATA_DIR / "CaseFolding-excerpt.txt"


@pytest.fixture
def excerpt_table(excerpt_path: Path) -> FoldingTable:
    return read_case_folding(excerpt_path)
