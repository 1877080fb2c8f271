# Minimal CLI using argparse that loads a property table and looks up addresses.
from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path

from ipprops.components.properties import (
    FlagGroupProperty,
    FlagProperty,
    Property,
    StringProperty,
    TagProperty,
)
from ipprops.core.config import TableConfig
from ipprops.core.errors import AddressParseError
from ipprops.core.table import Row, Table

KINDS = ("tag", "flag", "flags", "string")


def parse_column(spec: str, config: TableConfig) -> Property:
    """Build a property from NAME:KIND[:VOCAB]."""
    name, _, rest = spec.partition(":")
    kind, _, vocab = rest.partition(":")
    name, kind = name.strip(), kind.strip().lower()
    if not name or kind not in KINDS:
        raise ValueError(f"Invalid column spec {spec!r}, expected NAME:{'|'.join(KINDS)}[:VOCAB]")

    if kind == "tag":
        return TagProperty(name)
    if kind == "flag":
        return FlagProperty(name)
    if kind == "string":
        return StringProperty(name)
    tags = [t for t in re.split(r"[,;]", vocab) if t.strip()]
    if not tags:
        raise ValueError(f"Flag group {name!r} needs a vocabulary, e.g. {name}:flags:prod,dmz")
    return FlagGroupProperty(
        name,
        [t.strip() for t in tags],
        separator=config.flag_separator,
        no_flags_marker=config.no_flags_marker,
    )


def format_row(table: Table, row: Row) -> str:
    parts = []
    for col in table.columns:
        value = col.value(row)
        if isinstance(value, list):
            value = ";".join(value) or "-"
        parts.append(f"{col.name}={value}")
    return " ".join(parts)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ipprops", description="Look up properties of IP addresses in a range table"
    )
    p.add_argument("data", type=Path, help="Input file, one '<range>,<col1>,...' record per line")
    p.add_argument("addresses", nargs="*", help="Addresses to look up (default: dump the table)")
    p.add_argument(
        "--column",
        "-c",
        action="append",
        default=[],
        metavar="NAME:KIND[:VOCAB]",
        help="Column definition, in input order. KIND is tag, flag, flags or string.",
    )
    p.add_argument("--delimiter", default=",", help="Field delimiter (default: ,)")
    p.add_argument("--encoding", default="utf-8", help="Input encoding (default: utf-8)")
    p.add_argument(
        "--strict", action="store_true", help="Exit with status 1 if any line had invalid data"
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = TableConfig(delimiter=args.delimiter, encoding=args.encoding)
        table = Table(config)
        for spec in args.column:
            table.add_column(parse_column(spec, config))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not table.load(args.data):
        print(f"Error loading {args.data}", file=sys.stderr)
        return 2

    if args.addresses:
        for text in args.addresses:
            try:
                row = table.find(text)
            except AddressParseError as e:
                print(f"{text}: {e}")
                continue
            print(f"{text}: {format_row(table, row) if row is not None else 'not found'}")
    else:
        for rng, row in table.items():
            print(f"{rng}: {format_row(table, row)}")

    if args.strict and table.diagnostics:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
