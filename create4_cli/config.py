"""
CLI Configuration

Configuration for the create4-plan CLI. Settings come from, in increasing
precedence: built-in defaults, a JSON config file, a .env file, and
CREATE4_* environment variables.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from create4.schemas.encoding import normalize_address


# Environment variable prefix
ENV_PREFIX = "CREATE4_"

DEFAULT_CONFIG_FILENAME = "create4.json"

_FALSE_VALUES = ("0", "false", "no", "off", "")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() not in _FALSE_VALUES


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Logging
    log_level: str = "WARNING"
    log_file: str | None = None

    # Print tracebacks for errors
    debug: bool = False

    # Factory used by `address` when --factory is omitted
    default_factory: str | None = None

    # Indent JSON output
    pretty: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / DEFAULT_CONFIG_FILENAME,
        Path.cwd() / f".{DEFAULT_CONFIG_FILENAME}",
        Path.home() / ".config" / "create4" / "config.json",
    ]


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")

    config = CLIConfig()
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.debug = bool(data.get("debug", config.debug))
    config.pretty = bool(data.get("pretty", config.pretty))

    factory = data.get("default_factory")
    if factory:
        config.default_factory = normalize_address(factory)

    return config


def apply_env_overrides(config: CLIConfig) -> CLIConfig:
    """Apply CREATE4_* environment variables on top of config."""
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = os.environ[f"{ENV_PREFIX}LOG_LEVEL"]
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.environ[f"{ENV_PREFIX}LOG_FILE"]
    if f"{ENV_PREFIX}DEBUG" in os.environ:
        config.debug = _env_flag(f"{ENV_PREFIX}DEBUG")
    if f"{ENV_PREFIX}PRETTY" in os.environ:
        config.pretty = _env_flag(f"{ENV_PREFIX}PRETTY")
    if os.getenv(f"{ENV_PREFIX}FACTORY"):
        config.default_factory = normalize_address(os.environ[f"{ENV_PREFIX}FACTORY"])
    return config


def load_config(config_path: Path | None = None, *, use_dotenv: bool = True) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. When config_path is None
    the first existing default location is used.

    Args:
        config_path: Optional path to config file
        use_dotenv: Load a .env file from the working directory first

    Returns:
        Merged configuration
    """
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    return apply_env_overrides(config)


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(CLIConfig().to_dict(), indent=2) + "\n"
