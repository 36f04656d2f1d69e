from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import AppConfig, ExtractionConfig, ServerConfig

"""Config loader.

Responsibilities:
- Load YAML (default ``config/extract.yml``, overridable via
  ``VEHICLE_EXTRACT_CONFIG``)
- Validate against the bundled JSON schema
- Apply defaults for every missing key
"""

__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "resolve_config_path",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/extract.yml")
CONFIG_ENV_VAR = "VEHICLE_EXTRACT_CONFIG"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or the data violates it
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
    """Return (path, required).

    An explicit path or the environment override must exist; the default path
    is optional.
    """
    if explicit is not None:
        return explicit, True
    env = os.getenv(CONFIG_ENV_VAR)
    if env:
        return Path(env), True
    return DEFAULT_CONFIG_PATH, False


def _build_config(data: dict[str, Any]) -> AppConfig:
    defaults = ExtractionConfig()
    extraction = ExtractionConfig(
        header_scan_rows=data.get("header_scan_rows", defaults.header_scan_rows),
        min_sheet_rows=data.get("min_sheet_rows", defaults.min_sheet_rows),
        min_header_matches=data.get("min_header_matches", defaults.min_header_matches),
        balance_rounding=data.get("balance_rounding", defaults.balance_rounding),
        reader_mode=data.get("reader_mode", defaults.reader_mode),
        allowed_extensions=tuple(
            e.lower() for e in data.get("allowed_extensions", defaults.allowed_extensions)
        ),
    )
    server_raw = data.get("server") or {}
    server_defaults = ServerConfig()
    server = ServerConfig(
        host=server_raw.get("host", server_defaults.host),
        port=server_raw.get("port", server_defaults.port),
        upload_directory=server_raw.get("upload_directory", server_defaults.upload_directory),
        max_upload_bytes=server_raw.get("max_upload_bytes", server_defaults.max_upload_bytes),
    )
    return AppConfig(
        extraction=extraction,
        server=server,
        logs_directory=data.get("logs_directory", AppConfig().logs_directory),
    )


def load_config(path: Path | None = None) -> AppConfig:
    config_path, required = resolve_config_path(path)
    if not config_path.exists():
        if required:
            raise ConfigError(f"config file not found: {config_path}")
        return AppConfig()
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {config_path}")

    _validate_config_schema(data)
    return _build_config(data)
