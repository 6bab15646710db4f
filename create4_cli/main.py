"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    create4-plan build --input spec.json [--output plan.json] [--pretty]
    create4-plan address --input spec.json --factory 0x... [--salt 0x...]
    create4-plan proof --input spec.json --chain ID
    create4-plan view --input spec.json [--proofs]
    create4-plan gap --chain ID --next ID [--target ID]
    create4-plan verify --plan plan.json [--json]
    create4-plan config --init

Environment Variables:
    CREATE4_LOG_LEVEL    Log level (default: WARNING)
    CREATE4_LOG_FILE     Also write logs to this file
    CREATE4_DEBUG        Print tracebacks on error ("0"/"false" disable)
    CREATE4_FACTORY      Default factory address for `address`
    CREATE4_PRETTY       Indent JSON output
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from create4.schemas.errors import Create4Exception
from create4_cli import __version__
from create4_cli.commands import address, build, gap, proof, verify, view
from create4_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
)
from create4_cli.config import (
    DEFAULT_CONFIG_FILENAME,
    get_default_config_template,
    load_config,
)


logger = logging.getLogger(__name__)


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _add_debug_option(parser: argparse.ArgumentParser) -> None:
    # SUPPRESS keeps an absent subcommand flag from clearing the global one
    parser.add_argument(
        "--debug",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Print tracebacks on error",
    )


def _add_output_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write JSON to this file instead of stdout",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        default=False,
        help="Indent JSON output",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="create4-plan",
        description="CREATE4 deployment plans - build plans, compute addresses, query and verify proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: ./{DEFAULT_CONFIG_FILENAME} or ~/.config/create4/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Print tracebacks on error",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a deployment plan from a spec",
        description="Sort chain entries, link successors, append the fallback and emit the plan with proofs.",
    )
    build_parser.add_argument("--input", "-i", type=str, help="Path to plan spec JSON")
    _add_output_options(build_parser)
    _add_debug_option(build_parser)
    build_parser.set_defaults(func=build.build_cmd)

    # --- address command ---
    address_parser = subparsers.add_parser(
        "address",
        help="Compute the CREATE3 address of a plan",
        description="Derive the deployment salt from the plan root and compute the factory's CREATE3 address.",
    )
    address_parser.add_argument("--input", "-i", type=str, help="Path to plan spec JSON")
    address_parser.add_argument("--factory", "-f", type=str, default=None, help="Factory address")
    address_parser.add_argument("--salt", type=str, default=None, help="32-byte salt overriding the plan spec's salt")
    _add_output_options(address_parser)
    _add_debug_option(address_parser)
    address_parser.set_defaults(func=address.address_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Print the proof for one chain id",
        description="Emit the leaf fields and Merkle proof for a chain in the plan.",
    )
    proof_parser.add_argument("--input", "-i", type=str, help="Path to plan spec JSON")
    proof_parser.add_argument("--chain", type=str, default=None, help="Chain id (decimal or 0x-hex)")
    _add_output_options(proof_parser)
    _add_debug_option(proof_parser)
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- view command ---
    view_parser = subparsers.add_parser(
        "view",
        help="Show a human-readable plan summary",
    )
    view_parser.add_argument("--input", "-i", type=str, help="Path to plan spec JSON")
    view_parser.add_argument(
        "--proofs",
        action="store_true",
        default=False,
        help="Include proofs",
    )
    _add_debug_option(view_parser)
    view_parser.set_defaults(func=view.view_cmd)

    # --- gap command ---
    gap_parser = subparsers.add_parser(
        "gap",
        help="Describe the fallback gap of a leaf",
        description="Show which chain ids may use the fallback through a leaf; exits 2 if --target is outside it.",
    )
    gap_parser.add_argument("--chain", type=str, default=None, help="Leaf chain id")
    gap_parser.add_argument("--next", type=str, default=None, help="Leaf successor chain id")
    gap_parser.add_argument("--target", type=str, default=None, help="Chain id to test")
    gap_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    gap_parser.add_argument("--pretty", action="store_true", default=False, help="Indent JSON output")
    _add_debug_option(gap_parser)
    gap_parser.set_defaults(func=gap.gap_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a built plan offline",
        description="Re-derive every hash and proof of a plan file; exits 2 on any mismatch.",
    )
    verify_parser.add_argument("--plan", "-p", type=str, help="Path to plan JSON produced by build")
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    _add_debug_option(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_CONFIG_FILENAME,
        help=f"Path for config file (default: {DEFAULT_CONFIG_FILENAME})",
    )
    _add_debug_option(config_parser)
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (CREATE4_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: create4-plan config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.debug:
        config.debug = True
    log_level = args.log_level or ("DEBUG" if config.debug else config.log_level)
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config
    logger.debug(f"Running command: {args.command}")

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if isinstance(e, Create4Exception):
            logger.debug(f"Structured error: {e.to_error_model().model_dump_json()}")
        if config.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
