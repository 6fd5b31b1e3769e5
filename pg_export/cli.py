"""Command line interface for exporting a CSV file into a PostgreSQL table."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional

import psycopg

from pg_export.config import load_config
from pg_export.csv_source import iter_rows, load_csv
from pg_export.errors import ExportError
from pg_export.exporter import Exporter
from pg_export.logging_setup import configure_logging
from pg_export.models import Role

logger = logging.getLogger(__name__)


def _parse_types(pairs: List[str]) -> Dict[str, str]:
    types: Dict[str, str] = {}
    for pair in pairs:
        name, sep, ftype = pair.partition("=")
        if not sep or not name or not ftype:
            raise ValueError(f"Expected NAME=TYPE, got {pair!r}")
        types[name] = ftype
    return types


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the command line interface."""
    p = argparse.ArgumentParser(description="Export tabular rows into a PostgreSQL table")
    p.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Defaults to $LOG_LEVEL or INFO.",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    ex = sub.add_parser("export", help="Export a CSV file (first line is the header)")
    ex.add_argument("csv", type=Path, help="Input CSV file")
    ex.add_argument("--table", default=None, help="Target table (env PG_EXPORT_TABLE)")
    ex.add_argument("--schema", default=None, help="Target schema (env PG_EXPORT_SCHEMA, default public)")
    ex.add_argument("--dsn", default=None, help="PostgreSQL DSN (env PG_EXPORT_DSN)")
    ex.add_argument("--create-table", action="store_true", default=None,
                    help="Issue CREATE TABLE before inserting")
    ex.add_argument("--lat", default=None, help="Column holding the latitude")
    ex.add_argument("--lon", default=None, help="Column holding the longitude")
    ex.add_argument("--time", default=None, help="Column holding the timestamp")
    ex.add_argument("--type", dest="types", action="append", default=[],
                    metavar="NAME=TYPE", help="Field type for a column (default: char)")
    ex.add_argument("--batch-size", type=int, default=None, help="Rows per INSERT (default 200)")
    ex.add_argument("--srid", type=int, default=None, help="Geometry SRID (default 4326)")
    return p


async def run_export(args: argparse.Namespace) -> int:
    """Export ``args.csv`` and return the number of rows written."""
    config = load_config(
        table=args.table,
        schema=args.schema,
        dsn=args.dsn,
        create_table=args.create_table,
        batch_size=args.batch_size,
        srid=args.srid,
    )
    if not config.table:
        raise SystemExit("No target table given (--table or PG_EXPORT_TABLE)")

    cli_roles = {Role.LATITUDE: args.lat, Role.LONGITUDE: args.lon, Role.TIME: args.time}
    config.roles.update({r: name for r, name in cli_roles.items() if name})

    types = _parse_types(args.types)
    for role in (Role.LATITUDE, Role.LONGITUDE):
        if role in config.roles:
            types.setdefault(config.roles[role], "float")

    fields, total = load_csv(args.csv, types)
    logger.info("Exporting %d rows from %s into %s.%s",
                total, args.csv, config.schema, config.table)

    exporter = await Exporter.from_config(config)
    async with exporter:
        await exporter.init(fields, total)
        for row in iter_rows(args.csv, fields):
            await exporter.write(row)
    return exporter.metrics.rows_written


async def main(argv: Optional[List[str]] = None) -> None:
    """Run the exporter using command line arguments."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.cmd == "export":
        try:
            await run_export(args)
        except (ExportError, psycopg.Error, ValueError) as exc:
            logger.error("Export failed: %s", exc)
            raise SystemExit(1) from exc
