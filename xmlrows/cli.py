# ------------------------------------------------------------
# Module: xmlrows/cli.py
# Purpose: CLI to preview the unified schema, dump rows, or load an XML file into DuckDB.
# ------------------------------------------------------------

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from xmlrows.infra.core.logging import configure_logging
from xmlrows.ingest.loader_duckdb import DEFAULT_TABLE, load_xml_to_duckdb
from xmlrows.ingest.sources import open_xml_source
from xmlrows.reader.errors import XmlRowsError
from xmlrows.reader.options import load_options
from xmlrows.reader.reader import XmlRowReader

log = logging.getLogger("xmlrows.cli")


def _add_reader_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("xml", type=Path, help="XML file (.gz/.bz2/.zip accepted)")
    ap.add_argument("--data-level", type=int, help="Depth of row elements (root = 1).")
    ap.add_argument(
        "--flatten-level",
        type=int,
        help="Flatten elements deeper than this into scalar columns of the row.",
    )
    ap.add_argument("--row-tag", help="Only elements with this name start rows.")
    ap.add_argument(
        "--columns",
        default="*",
        help="Comma-separated dotted paths to project (default: *).",
    )
    ap.add_argument("--limit", type=int, help="Stop after this many rows.")
    ap.add_argument("--batch-size", type=int)
    ap.add_argument("--attribute-scope", choices=("row", "all"))
    ap.add_argument("--flatten-collision", choices=("first", "last", "number"))
    ap.add_argument("--pin-schema", action="store_true", default=None)


def _options(args: argparse.Namespace) -> dict[str, Any]:
    raw = {
        "data_level": args.data_level,
        "flatten_level": args.flatten_level,
        "row_tag": args.row_tag,
        "projection": args.columns,
        "limit": args.limit,
        "batch_size": args.batch_size,
        "attribute_scope": args.attribute_scope,
        "flatten_collision": args.flatten_collision,
        "pin_schema": args.pin_schema,
    }
    return {k: v for k, v in raw.items() if v is not None}


def _cmd_schema(args: argparse.Namespace) -> int:
    opts = load_options(_options(args), pin_schema=True)
    schema = None
    with open_xml_source(args.xml) as stream, XmlRowReader(stream, opts) as reader:
        for batch in reader:
            schema = batch.schema
        payload = {
            "columns": schema.to_dict() if schema is not None else [],
            "diagnostics": reader.diagnostics.as_dict(),
        }
    print(json.dumps(payload, indent=2))
    return 0


def _cmd_rows(args: argparse.Namespace) -> int:
    opts = load_options(_options(args))
    with open_xml_source(args.xml) as stream, XmlRowReader(stream, opts) as reader:
        for batch in reader:
            for row in batch.rows:
                sys.stdout.write(json.dumps(row, ensure_ascii=False) + "\n")
    return 0


def _cmd_load(args: argparse.Namespace) -> int:
    result = load_xml_to_duckdb(
        args.xml, args.db, table=args.table, options=_options(args)
    )
    print(json.dumps(result, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        "xmlrows", description="Schema-on-read XML → rows (schema | rows | load)."
    )
    ap.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING...")
    sub = ap.add_subparsers(dest="command", required=True)

    p_schema = sub.add_parser("schema", help="Print the unified schema as JSON.")
    _add_reader_args(p_schema)
    p_schema.set_defaults(func=_cmd_schema)

    p_rows = sub.add_parser("rows", help="Print padded rows as JSONL.")
    _add_reader_args(p_rows)
    p_rows.set_defaults(func=_cmd_rows)

    p_load = sub.add_parser("load", help="Load rows into a DuckDB table.")
    _add_reader_args(p_load)
    p_load.add_argument("--db", required=True, help="DuckDB database file")
    p_load.add_argument("--table", default=DEFAULT_TABLE)
    p_load.set_defaults(func=_cmd_load)

    args = ap.parse_args(argv)
    configure_logging(args.log_level.upper() if args.log_level else None)
    try:
        return args.func(args)
    except (XmlRowsError, FileNotFoundError) as e:
        log.error("%s failed: %s", args.command, e)
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
