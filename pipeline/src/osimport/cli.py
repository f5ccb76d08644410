"""CLI entrypoint for Ordnance Survey open data imports."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from osimport.config import default_dsn
from osimport.errors import OSImportError
from osimport.job import DatasetKind, ImportJob
from osimport.runner import run_import


def _add_target_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("server", help="Database server host")
    parser.add_argument("database", help="Database to load the data into")
    parser.add_argument("schema", help="Schema to create the tables in")
    parser.add_argument("table", help="Table to create; must not already exist")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="osimport")
    parser.add_argument(
        "--dsn",
        default=default_dsn(),
        help="Base PostgreSQL conninfo for credentials and port (default: $OSIMPORT_DSN)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Progress log level",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Import an Ordnance Survey dataset")
    import_subparsers = import_parser.add_subparsers(dest="import_kind", required=True)

    codepoint_parser = import_subparsers.add_parser(
        "CODEPOINT",
        aliases=["codepoint"],
        help="Import Code-Point postcode CSV files",
    )
    _add_target_arguments(codepoint_parser)
    codepoint_parser.add_argument("data_directory", type=Path)
    codepoint_parser.add_argument("column_header_file", type=Path, nargs="?")
    codepoint_parser.add_argument("--encoding", default=None)

    gazetteer_parser = import_subparsers.add_parser(
        "GAZETTEER",
        aliases=["gazetteer"],
        help="Import the 1:50 000 Scale Gazetteer data file",
    )
    _add_target_arguments(gazetteer_parser)
    gazetteer_parser.add_argument("county_lookup_table")
    gazetteer_parser.add_argument("feature_lookup_table")
    gazetteer_parser.add_argument("data_file", type=Path)
    gazetteer_parser.add_argument("--encoding", default=None)

    return parser


def job_from_args(args: argparse.Namespace) -> ImportJob:
    kind = DatasetKind.parse(args.import_kind)
    if kind is DatasetKind.CODEPOINT:
        return ImportJob(
            kind=kind,
            server=args.server,
            database=args.database,
            schema=args.schema,
            table=args.table,
            source=args.data_directory,
            header_file=args.column_header_file,
            encoding=args.encoding,
        )
    return ImportJob(
        kind=kind,
        server=args.server,
        database=args.database,
        schema=args.schema,
        table=args.table,
        source=args.data_file,
        county_table=args.county_lookup_table,
        feature_table=args.feature_lookup_table,
        encoding=args.encoding,
    )


def main(argv: list[str] | None = None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "import":
            job = job_from_args(args)
            result = run_import(job, base_dsn=args.dsn)
            print(
                json.dumps(
                    {
                        "status": "ok",
                        "message": "The import process is complete",
                        "dataset": result.kind.value,
                        "schema": result.schema,
                        "table": result.table,
                        "rows_loaded": result.rows_loaded,
                        "derived_rows": result.derived_rows,
                        "lookup_rows": result.lookup_rows,
                        "staged_sha256": result.staged_sha256,
                    }
                )
            )
            return 0

        parser.print_help(sys.stderr)
        return 2
    except (OSImportError, FileNotFoundError) as exc:
        print(json.dumps({"status": "error", "error": str(exc)}), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
