"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TextIO

from inventorize import __version__
from inventorize.config import (
    BuildConfig,
    CliOverrides,
    RunConfig,
    Settings,
    UpdateConfig,
    VerifyConfig,
    load_effective_settings,
    make_run_config,
)
from inventorize.errors import InventorizeError, InventoryLocationError
from inventorize.inventory.hashing import SUPPORTED_HASH_ALGORITHMS
from inventorize.inventory.report import summary_lines
from inventorize.logging import configure_console_logging
from inventorize.operations import OperationResult, run_build, run_update, run_verify

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

logger = logging.getLogger("inventorize")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="inventorize",
        description="Builds and maintains an inventory of files in a repository directory.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--inventory",
        required=True,
        help="Path to the inventory file (must be outside of the repository)",
    )
    parser.add_argument("--repository", default=".", help="Path to the repository")
    parser.add_argument("--config", default=None, help="Optional TOML configuration file")
    parser.add_argument("--workers", type=int, default=None, help="Hashing worker threads")
    parser.add_argument("--audit-log", default=None, help="Append a JSONL event per run")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Verbose output (repeatable)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Builds the inventory")
    build.add_argument(
        "--overwrite", action="store_true", help="Overwrite inventory file if it exists"
    )
    build.add_argument("--skip-hidden", action="store_true", help="Skip hidden files")
    build.add_argument(
        "--hash-algorithm",
        action="append",
        choices=SUPPORTED_HASH_ALGORITHMS,
        default=None,
        help="Hash algorithm(s) to use (repeatable, default: md5)",
    )

    verify = subparsers.add_parser("verify", help="Verifies files")
    verify.add_argument("--quick", action="store_true", help="Only check presence and sizes")

    update = subparsers.add_parser("update", help="Updates the inventory")
    update.add_argument(
        "--remove-missing", action="store_true", help="Remove missing files from inventory"
    )
    return parser


def cli_overrides(args: argparse.Namespace) -> CliOverrides:
    """Translate parsed arguments into configuration overrides."""
    hash_algorithms = getattr(args, "hash_algorithm", None)
    return CliOverrides(
        hash_algorithms=tuple(hash_algorithms) if hash_algorithms else None,
        skip_hidden=True if getattr(args, "skip_hidden", False) else None,
        workers=args.workers,
        audit_log=Path(args.audit_log) if args.audit_log is not None else None,
    )


def run_command(args: argparse.Namespace, run: RunConfig, settings: Settings) -> OperationResult:
    """Dispatch to the operation named on the command line."""
    if args.command == "build":
        return run_build(
            run,
            BuildConfig(
                overwrite=args.overwrite,
                skip_hidden=settings.skip_hidden,
                hash_algorithms=settings.hash_algorithms,
            ),
        )
    if args.command == "verify":
        return run_verify(run, VerifyConfig(quick=args.quick))
    return run_update(run, UpdateConfig(remove_missing=args.remove_missing))


def render_result(
    result: OperationResult, out_stream: TextIO, as_json: bool, verbose: bool
) -> None:
    if as_json:
        out_stream.write(f"{json.dumps(result.to_dict(), sort_keys=True)}\n")
        return
    for line in summary_lines(result.report, verbose=verbose):
        out_stream.write(f"{line}\n")


def main(argv: list[str] | None = None, out_stream: TextIO | None = None) -> int:
    """Entrypoint for the inventorize command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_console_logging(args.verbose)
    out = out_stream if out_stream is not None else sys.stdout

    try:
        settings = load_effective_settings(
            config_path=Path(args.config) if args.config is not None else None,
            overrides=cli_overrides(args),
        )
        run = make_run_config(
            repository=Path(args.repository),
            inventory=Path(args.inventory),
            settings=settings,
            verbosity=args.verbose,
        )
    except InventoryLocationError as error:
        logger.error("%s %s", error.reason, error.hint)
        return EXIT_USAGE
    except ValueError as error:
        logger.error("%s", error)
        return EXIT_USAGE

    try:
        result = run_command(args, run, settings)
    except InventorizeError as error:
        logger.error("%s", error)
        return EXIT_FAILURE

    render_result(result, out, as_json=args.json, verbose=args.verbose > 0)
    if result.error is not None:
        logger.error("%s", result.error)
    return EXIT_OK if result.ok else EXIT_FAILURE
