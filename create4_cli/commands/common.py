"""
Shared helpers for CLI commands: reading input files and writing JSON output.
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path
from typing import Any

from create4.schemas.errors import PlanValidationException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


class UsageError(Exception):
    """A required option is missing or malformed."""


def require_option(args: Namespace, name: str, message: str) -> Any:
    value = getattr(args, name, None)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise UsageError(message)
    return value


def read_json_file(path: str) -> Any:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)


def read_spec(args: Namespace) -> dict[str, Any]:
    """Load the --input plan spec; it must decode to a JSON object."""
    path = require_option(args, "input", "Missing required --input parameter")
    data = read_json_file(path)
    if not isinstance(data, dict):
        raise PlanValidationException("Input spec must be a JSON object")
    logger.debug(f"Loaded plan spec from {path} with {len(data.get('chains') or [])} chain entries")
    return data


def is_pretty(args: Namespace) -> bool:
    if getattr(args, "pretty", False):
        return True
    config = getattr(args, "cli_config", None)
    return bool(config and config.pretty)


def format_json(data: Any, pretty: bool) -> str:
    if pretty:
        return json.dumps(data, indent=2)
    return json.dumps(data, separators=(",", ":"))


def emit_json(args: Namespace, data: Any) -> None:
    """Write data to --output if given, else print it."""
    text = format_json(data, is_pretty(args))
    output = getattr(args, "output", None)
    if output:
        out_path = Path(output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote {out_path}")
    else:
        print(text)
