from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load the YAML config (config/hasher.yml by default, PII_HASHER_CONFIG overrides)
- Validate against the packaged JSON schema (no unknown keys)
- Apply defaults for every missing key

The target column set is fixed and deliberately not configurable here.
"""

__all__ = [
    "ConfigError",
    "HasherConfig",
    "DEFAULT_CONFIG_PATH",
    "CONFIG_ENV_VAR",
    "SCHEMA_PATH",
    "load_config",
    "resolve_config_path",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/hasher.yml")
CONFIG_ENV_VAR = "PII_HASHER_CONFIG"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class HasherConfig:
    chunk_size: int = 100  # Rows per cooperative batch
    output_directory: str = "./output"  # Where *_encrypted files are written
    logs_directory: str = "./logs"  # Where errors-*.log files are written
    max_file_size_mb: int = 100  # Upload size limit


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the data
            violates the schema (unknown keys, wrong types, out of range)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def resolve_config_path(explicit: Path | None = None) -> tuple[Path, bool]:
    """Pick the config file to load.

    Returns:
        (path, required): ``required`` is True when the path was asked for
        explicitly (argument or environment) and must therefore exist
    """
    if explicit is not None:
        return explicit, True
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path), True
    return DEFAULT_CONFIG_PATH, False


def load_config(path: Path | None = None, *, required: bool = True) -> HasherConfig:
    if path is None or not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        return HasherConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    defaults = HasherConfig()
    return HasherConfig(
        chunk_size=data.get("chunk_size", defaults.chunk_size),
        output_directory=data.get("output_directory", defaults.output_directory),
        logs_directory=data.get("logs_directory", defaults.logs_directory),
        max_file_size_mb=data.get("max_file_size_mb", defaults.max_file_size_mb),
    )
