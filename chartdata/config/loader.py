from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import IngestConfig

"""Config loader.

Responsibilities:
- Load the YAML ingest config (config/ingest.yml by default)
- Validate it against the packaged JSON schema (unknown keys rejected)
- Apply defaults from IngestConfig for anything not set
- Apply environment overrides (CHARTDATA_MAX_SIZE_MB / CHARTDATA_DELIMITER)
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "config_from_mapping",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("ingest_schema.json")
DEFAULT_CONFIG_PATH = Path("config/ingest.yml")

ENV_MAX_SIZE_MB = "CHARTDATA_MAX_SIZE_MB"
ENV_DELIMITER = "CHARTDATA_DELIMITER"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: the schema file is missing or invalid, or the data fails
            validation (wrong types, unknown keys, ...)
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


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    raw_size = env.get(ENV_MAX_SIZE_MB)
    if raw_size:
        try:
            size = float(raw_size)
        except ValueError as e:
            raise ConfigError(f"{ENV_MAX_SIZE_MB} must be a number: {raw_size!r}") from e
        if size <= 0:
            raise ConfigError(f"{ENV_MAX_SIZE_MB} must be positive: {raw_size!r}")
        overrides["max_size_mb"] = size
    delimiter = env.get(ENV_DELIMITER)
    if delimiter:
        # "\t" をエスケープ表記で書けるようにする
        overrides["delimiter"] = "\t" if delimiter == "\\t" else delimiter
    return overrides


def config_from_mapping(data: Mapping[str, Any], env: Mapping[str, str] | None = None) -> IngestConfig:
    """Build an IngestConfig from already-parsed config data.

    Args:
        data: mapping shaped like the YAML file
        env: environment used for overrides (os.environ when None)
    """
    data = dict(data)
    _validate_config_schema(data)

    csv_raw = data.get("csv") or {}
    excel_raw = data.get("excel") or {}
    json_raw = data.get("json") or {}
    xml_raw = data.get("xml") or {}
    defaults = IngestConfig()

    values: dict[str, Any] = {
        "max_size_mb": data.get("max_size_mb", defaults.max_size_mb),
        "delimiter": csv_raw.get("delimiter", defaults.delimiter),
        "header": csv_raw.get("header", defaults.header),
        "skip_empty_lines": csv_raw.get("skip_empty_lines", defaults.skip_empty_lines),
        "dynamic_typing": csv_raw.get("dynamic_typing", defaults.dynamic_typing),
        "encoding": csv_raw.get("encoding", defaults.encoding),
        "sheet_index": excel_raw.get("sheet_index", defaults.sheet_index),
        "sheet_name": excel_raw.get("sheet_name", defaults.sheet_name),
        "json_array_path": json_raw.get("array_path", defaults.json_array_path),
        "flatten_nested": json_raw.get("flatten_nested", defaults.flatten_nested),
        "xml_row_path": xml_raw.get("row_path", defaults.xml_row_path),
        "xml_attribute_prefix": xml_raw.get("attribute_prefix", defaults.xml_attribute_prefix),
    }
    values.update(_env_overrides(os.environ if env is None else env))
    return IngestConfig(**values)


def load_config(path: Path, env: Mapping[str, str] | None = None) -> IngestConfig:
    """Load and validate a YAML config file.

    An empty file gives the defaults.

    Raises:
        ConfigError: missing file, invalid YAML, or schema violation
    """
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: top level must be a mapping, got {type(data).__name__}")
    return config_from_mapping(data, env=env)
