from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.comparison import Side
from ..models.config_models import (
    DEFAULT_HEADER_ROW,
    DEFAULT_LOG_DIRECTORY,
    DEFAULT_MAX_SHEETS,
    DEFAULT_REPORT_PATH,
    CompareConfig,
    ReconcileConfig,
)

"""Config loader.

Responsibilities:
- Load the YAML config (default config/compare.yml)
- Validate it against compare_schema.json
- Apply defaults and build CompareConfig
"""

SCHEMA_PATH = Path(__file__).with_name("compare_schema.json")
DEFAULT_CONFIG_PATH = Path("config/compare.yml")


class ConfigError(Exception):
    pass


def _load_schema() -> dict[str, Any]:
    if not SCHEMA_PATH.is_file():
        raise ConfigError(f"config schema missing: {SCHEMA_PATH}")
    try:
        return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"schema file is not valid JSON: {e}") from e


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Check ``data`` against compare_schema.json.

    Raises:
        ConfigError: schema unusable, or the first validation error found
    """
    try:
        jsonschema.validate(data, _load_schema())
    except ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"config validation failed at {where}: {e.message}") from e


def load_config(path: Path) -> CompareConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    reconcile = None
    rec_raw = data.get("reconcile")
    if rec_raw:
        reconcile = ReconcileConfig(target=Side(rec_raw["target"]), output_path=rec_raw["output_path"])

    return CompareConfig(
        file_a=data["file_a"],
        file_b=data["file_b"],
        key_columns=data["key_columns"],
        sheets=data.get("sheets"),
        header_row=data.get("header_row", DEFAULT_HEADER_ROW),
        case_sensitive_keys=data.get("case_sensitive_keys", False),
        max_sheets=data.get("max_sheets", DEFAULT_MAX_SHEETS),
        na_strings=list(data.get("na_strings", [])),
        report_path=data.get("report_path", DEFAULT_REPORT_PATH),
        log_directory=data.get("log_directory", DEFAULT_LOG_DIRECTORY),
        reconcile=reconcile,
    )
