from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from unifold import engine
from unifold.config import Settings
from unifold.errors import MalformedText
from unifold.table import FoldingTable


def test_defaults() -> None:
    s = Settings.from_env({})
    assert s.table_path is None
    assert s.malformed == "strict"


def test_values_are_parsed() -> None:
    s = Settings.from_env({"UNIFOLD_TABLE": " /tmp/t.json ", "UNIFOLD_MALFORMED": "PassThrough"})
    assert s.table_path == Path("/tmp/t.json")
    assert s.malformed == "passthrough"


def test_empty_and_unknown_values_fall_back() -> None:
    s = Settings.from_env({"UNIFOLD_TABLE": "  ", "UNIFOLD_MALFORMED": "lenient"})
    assert s.table_path is None
    assert s.malformed == "strict"


@pytest.fixture
def fresh_default():
    engine.reset_default_engine()
    yield
    engine.reset_default_engine()


def test_default_engine_uses_configured_table(monkeypatch, fresh_default) -> None:
    table = FoldingTable.from_pairs([(ord("A"), [ord("a")])], source="custom")
    with tempfile.TemporaryDirectory() as td:
        p = table.save(Path(td) / "table.json")
        monkeypatch.setenv("UNIFOLD_TABLE", str(p))
        monkeypatch.setenv("UNIFOLD_MALFORMED", "passthrough")

        assert engine.fold("ABß\ud800") == "aBß\ud800"
        assert engine.default_table().source == "custom"


def test_default_engine_without_configuration(monkeypatch, fresh_default) -> None:
    monkeypatch.delenv("UNIFOLD_TABLE", raising=False)
    monkeypatch.delenv("UNIFOLD_MALFORMED", raising=False)

    assert engine.default_table().source == "unicodedata"
    with pytest.raises(MalformedText):
        engine.fold("\ud800")
