#!/usr/bin/env python3
"""
Run a SQL script file against a database.

Usage:
  sqlrunner SCRIPT --product-type postgres --host localhost --database app --username app
  sqlrunner - --product-type sqlite --database ./local.db < schema.sql

Password: --password or SQLRUNNER_PASSWORD env. Toggles not given on the command
line fall back to the SCRIPT_* settings (env / .env).
``--var NAME=VALUE`` replaces ``${NAME}`` in the script before it runs.

Exit status: 0 success, 1 script or connection failure, 2 usage error.
"""

import argparse
import io
import logging
import os
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sqlrunner.core.config import settings
from sqlrunner.core.session import open_session
from sqlrunner.engines.script import ScriptRunner, ScriptRunnerError
from sqlrunner.engines.sql import substitute_variables
from sqlrunner.models import DataSource, ProductTypeEnum
from sqlrunner.schemas import RunConfig

_log = logging.getLogger(__name__)

# RunConfig boolean fields exposed as --flag / --no-flag
_TOGGLES = {
    "stop_on_error": "Abort on the first failing statement",
    "throw_warning": "Treat SQL warnings as errors (with --stop-on-error)",
    "autocommit": "Run in autocommit mode instead of one transaction",
    "send_full_script": "Send the whole script as a single statement",
    "remove_crs": "Convert CRLF to LF before sending each statement",
    "escape_processing": "Statement escape processing",
    "full_line_delimiter": "Delimiter must be alone on its line",
}


def _parse_vars(items: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for item in items:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"--var expects NAME=VALUE, got {item!r}")
        out[name.strip()] = value
    return out


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqlrunner",
        description="Run a SQL script statement by statement against a database.",
    )
    parser.add_argument("script", help="Path to the SQL script, or - for stdin")
    parser.add_argument(
        "--product-type",
        required=True,
        choices=[p.value for p in ProductTypeEnum],
        help="Database product",
    )
    parser.add_argument("--host", help="Database host (not used for sqlite)")
    parser.add_argument("--port", type=int, help="Database port (default per product)")
    parser.add_argument(
        "--database", required=True, help="Database name, Trino catalog, or sqlite file"
    )
    parser.add_argument("--username", help="Database user")
    parser.add_argument(
        "--password",
        default=os.environ.get("SQLRUNNER_PASSWORD"),
        help="Database password (or set SQLRUNNER_PASSWORD env)",
    )
    parser.add_argument("--use-ssl", action="store_true", help="Trino: use HTTPS")
    parser.add_argument("--encoding", default="utf-8", help="Script file encoding")
    parser.add_argument("--delimiter", help="Statement delimiter (default ;)")
    parser.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Replace ${NAME} in the script (repeatable)",
    )
    for field, help_text in _TOGGLES.items():
        parser.add_argument(
            "--" + field.replace("_", "-"),
            dest=field,
            action=argparse.BooleanOptionalAction,
            default=None,
            help=help_text,
        )
    return parser


def _read_script(path: str, encoding: str) -> str:
    if path == "-":
        stream = io.TextIOWrapper(sys.stdin.buffer, encoding=encoding, newline="")
        try:
            return stream.read()
        finally:
            stream.detach()
    with Path(path).open(encoding=encoding, newline="") as f:
        return f.read()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {
        field: getattr(args, field) for field in _TOGGLES if getattr(args, field) is not None
    }
    if args.delimiter is not None:
        overrides["delimiter"] = args.delimiter

    try:
        variables = _parse_vars(args.var)
        config = RunConfig.from_settings(**overrides)
        datasource = DataSource(
            product_type=args.product_type,
            host=args.host,
            port=args.port,
            database=args.database,
            username=args.username,
            password=args.password,
            use_ssl=args.use_ssl,
        )
    except (ValueError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        script = _read_script(args.script, args.encoding)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: cannot read {args.script}: {e}", file=sys.stderr)
        return 2
    if variables:
        script = substitute_variables(script, variables)

    try:
        session = open_session(datasource, autocommit=config.autocommit)
    except Exception as e:
        _log.error("Connection failed: %s", e, exc_info=True)
        print(f"Error: connection failed: {e}", file=sys.stderr)
        return 1

    with ScriptRunner(session, config) as runner:
        try:
            runner.run_script(script)
        except ScriptRunnerError:
            # already written to the error sink
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
