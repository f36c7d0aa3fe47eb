"""
Configuration from .env, environment variables and an optional TOML file.

Precedence, highest first: command line, TOML file, environment, defaults.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from autoperft.constants import (
    CONFIG_TABLE,
    DEFAULT_CONFIG_FILE,
    DEFAULT_EPD_FILE,
    ENV_EPD_FILE,
    ENV_TIMEOUT,
)
from autoperft.errors import ConfigError

# Load environment variables
load_dotenv(Path(__file__).parent.parent / '.env')

# Accepted keys of the [autoperft] table and their types
CONFIG_KEYS = {
    "epd": str,
    "timeout": (int, float),
    "chess960": bool,
    "ignore_case": bool,
    "fail_fast": bool,
    "start": int,
    "end": int,
}


def get_epd_file() -> Path:
    """Get the EPD suite to run when none is given on the command line."""
    if os.environ.get(ENV_EPD_FILE):
        return Path(os.environ[ENV_EPD_FILE])
    return DEFAULT_EPD_FILE


def get_timeout() -> Optional[float]:
    """Per-invocation generator timeout in seconds, or None to wait forever."""
    value = os.environ.get(ENV_TIMEOUT)
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"Invalid {ENV_TIMEOUT} value {value!r}: must be a number")


def _check_type(key: str, value):
    expected = CONFIG_KEYS[key]
    # bool is an int subclass; only accept it where a bool is wanted
    if isinstance(value, bool) and expected is not bool:
        raise ConfigError(f"Config key {key!r} must not be a boolean")
    if not isinstance(value, expected):
        raise ConfigError(f"Config key {key!r} has invalid value {value!r}")


def load_config(config_file: Optional[Path] = None) -> dict:
    """
    Load the [autoperft] table of a TOML config file.

    Without an explicit path, autoperft.toml in the working directory is
    used if it exists. Returns an empty dict if there is nothing to load.

    Raises:
        ConfigError: if the file cannot be read or parsed, or the table
            holds unknown keys or values of the wrong type.
    """
    if config_file is None:
        config_file = Path.cwd() / DEFAULT_CONFIG_FILE
        if not config_file.exists():
            return {}

    try:
        import tomllib
    except ImportError:
        import tomli as tomllib

    try:
        with open(config_file, 'rb') as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read config file {config_file}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid config file {config_file}: {e}") from e

    config = data.get(CONFIG_TABLE, {})
    if not isinstance(config, dict):
        raise ConfigError(f"[{CONFIG_TABLE}] in {config_file} must be a table")
    unknown = sorted(set(config) - set(CONFIG_KEYS))
    if unknown:
        raise ConfigError(f"Unknown config keys in {config_file}: {', '.join(unknown)}")
    for key, value in config.items():
        _check_type(key, value)
    return config
