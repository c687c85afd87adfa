from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Settings
from .engine import FoldingEngine, default_engine
from .errors import TableError, UcdFetchError, UcdParseError, UnifoldError
from .integrity import check_conformance, check_table
from .table import FoldingTable
from .ucd import CASE_FOLDING_URL, derive_table, load_source

logger = logging.getLogger(__name__)

# ---- Exit codes ----
EXIT_OK = 0
EXIT_NOT_EQUAL = 1
EXIT_USAGE = 2
EXIT_INTEGRITY_FAILED = 10
EXIT_TABLE_INVALID = 12
EXIT_SOURCE_FAILED = 14
EXIT_CONFORMANCE_MISMATCH = 20
EXIT_INTERNAL_ERROR = 99


def parse_code_point(s: str) -> int:
    """Accept `65`, `0x41` or `U+0041`."""

    t = s.strip()
    try:
        if t[:2].lower() in ("u+", "0x"):
            return int(t[2:], 16)
        return int(t, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a code point: {s!r}")


def _fmt(seq) -> str:
    return " ".join(f"{cp:04X}" for cp in seq)


def _engine(args: argparse.Namespace) -> FoldingEngine:
    if getattr(args, "table", None):
        return FoldingEngine(FoldingTable.load(Path(args.table)), malformed=Settings.from_env().malformed)
    return default_engine()


def cmd_fold(args: argparse.Namespace) -> int:
    print(_engine(args).fold(args.text))
    return EXIT_OK


def cmd_equals(args: argparse.Namespace) -> int:
    eq = _engine(args).fold_equals(args.a, args.b)
    print("true" if eq else "false")
    return EXIT_OK if eq else EXIT_NOT_EQUAL


def cmd_lookup(args: argparse.Namespace) -> int:
    cp = args.code_point
    repl = _engine(args).lookup_folding(cp)
    if repl is None:
        print(f"U+{cp:04X}: (folds to itself)")
    else:
        print(f"U+{cp:04X} -> {_fmt(repl)}")
    return EXIT_OK


def cmd_build(args: argparse.Namespace) -> int:
    if args.from_unicodedata:
        table = derive_table()
    else:
        table = load_source(args.source)
    out = table.save(Path(args.out))
    logger.info("wrote %s", out)
    print(table.fingerprint)
    return EXIT_OK


def cmd_verify(args: argparse.Namespace) -> int:
    table = _engine(args).table

    r = check_table(table)
    if not r.ok:
        for e in r.errors:
            print(e, file=sys.stderr)
        return EXIT_INTEGRITY_FAILED

    if args.against:
        canonical = load_source(args.against)
        r = check_conformance(table, canonical)
        if not r.ok:
            for e in r.errors:
                print(e, file=sys.stderr)
            print(
                f"table {table.fingerprint} (Unicode {table.unicode_version}) does not match "
                f"{canonical.source} (Unicode {canonical.unicode_version})",
                file=sys.stderr,
            )
            return EXIT_CONFORMANCE_MISMATCH

    print(f"OK ({len(table)} entries, {table.fingerprint})")
    return EXIT_OK


def cmd_fingerprint(args: argparse.Namespace) -> int:
    print(_engine(args).table.fingerprint)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="unifold", description="Unicode full case folding.")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    def table_opt(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--table", help="Prepared table JSON (default: $UNIFOLD_TABLE or unicodedata).")

    p_fold = sub.add_parser("fold", help="Print the case fold of TEXT.")
    p_fold.add_argument("text")
    table_opt(p_fold)
    p_fold.set_defaults(fn=cmd_fold)

    p_eq = sub.add_parser("equals", help="Exit 0 if A and B are fold-equivalent, 1 otherwise.")
    p_eq.add_argument("a")
    p_eq.add_argument("b")
    table_opt(p_eq)
    p_eq.set_defaults(fn=cmd_equals)

    p_lk = sub.add_parser("lookup", help="Show the folding of one code point (65, 0x41, U+0041).")
    p_lk.add_argument("code_point", type=parse_code_point)
    table_opt(p_lk)
    p_lk.set_defaults(fn=cmd_lookup)

    p_b = sub.add_parser("build", help="Prepare a table file from CaseFolding.txt.")
    src = p_b.add_mutually_exclusive_group()
    src.add_argument(
        "--source",
        default=CASE_FOLDING_URL,
        help="URL or path of CaseFolding.txt (default: latest from unicode.org).",
    )
    src.add_argument(
        "--from-unicodedata",
        action="store_true",
        help="Derive the table from this interpreter's Unicode database instead.",
    )
    p_b.add_argument("--out", required=True, help="Output JSON path.")
    p_b.set_defaults(fn=cmd_build)

    p_v = sub.add_parser("verify", help="Check table integrity and, optionally, conformance.")
    table_opt(p_v)
    p_v.add_argument("--against", help="URL or path of a canonical CaseFolding.txt to diff against.")
    p_v.set_defaults(fn=cmd_verify)

    p_fp = sub.add_parser("fingerprint", help="Print the table fingerprint.")
    table_opt(p_fp)
    p_fp.set_defaults(fn=cmd_fingerprint)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.fn(args)
    except KeyboardInterrupt:
        return 130
    except TableError as e:
        print(f"invalid table: {e}", file=sys.stderr)
        return EXIT_TABLE_INVALID
    except (UcdFetchError, UcdParseError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_SOURCE_FAILED
    except UnifoldError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except Exception as e:
        logger.debug("unexpected failure", exc_info=True)
        print(f"INTERNAL_ERROR: {e}", file=sys.stderr)
        return EXIT_INTERNAL_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
