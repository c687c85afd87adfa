from __future__ import annotations

from unifold import default_table
from unifold.integrity import check_conformance, check_table, diff_tables, unstable_targets
from unifold.table import FoldingTable


def test_real_table_is_idempotent() -> None:
    t = default_table()
    assert unstable_targets(t) == []
    r = check_table(t)
    assert r.ok, r.errors[:5]


def test_excerpt_passes_integrity(excerpt_table: FoldingTable) -> None:
    assert check_table(excerpt_table).ok


def test_unstable_targets_are_flagged() -> None:
    t = FoldingTable.from_pairs([(0x41, [0x42, 0x63]), (0x42, [0x62])])
    assert unstable_targets(t) == [(0x41, 0x42)]
    r = check_table(t)
    assert not r.ok
    assert r.errors == ["unstable target: U+0041 -> 0042 0063 (U+0042 -> 0062)"]


def test_identity_entries_are_flagged() -> None:
    r = check_table(FoldingTable.from_pairs([(0x61, [0x61])]))
    assert not r.ok
    assert r.errors == ["identity entry: U+0061"]


def test_target_with_identity_entry_is_not_unstable() -> None:
    t = FoldingTable.from_pairs([(0x41, [0x61]), (0x61, [0x61])])
    assert unstable_targets(t) == []
    assert check_table(t).errors == ["identity entry: U+0061"]


def test_diff_tables() -> None:
    expected = FoldingTable.from_pairs([(0x41, [0x61]), (0xDF, [0x73, 0x73]), (0x130, [0x69, 0x307])])
    actual = FoldingTable.from_pairs([(0x41, [0x61]), (0xDF, [0xDF]), (0x42, [0x62])])

    d = diff_tables(actual, expected)
    assert not d.empty
    assert d.missing == {0x130: (0x69, 0x307)}
    assert d.extra == {0x42: (0x62,)}
    assert d.changed == {0xDF: ((0xDF,), (0x73, 0x73))}

    assert diff_tables(expected, expected).empty


def test_check_conformance_reports_every_difference(excerpt_table: FoldingTable) -> None:
    assert check_conformance(excerpt_table, excerpt_table).ok

    pairs = [(k, v) for k, v in excerpt_table.items() if k != 0x130]
    pairs = [(k, (0xDF,) if k == 0x1E9E else v) for k, v in pairs]
    pairs.append((0x131, (0x69,)))
    actual = FoldingTable.from_pairs(pairs)

    r = check_conformance(actual, excerpt_table)
    assert not r.ok
    assert r.errors == [
        "missing: U+0130 -> 0069 0307",
        "extra: U+0131 -> 0069",
        "changed: U+1E9E -> 00DF (expected 0073 0073)",
    ]
