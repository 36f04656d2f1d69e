from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from vehicle_extract.config.loader import SCHEMA_PATH

"""Bundled config schema contract; the shipped sample config must validate."""

REPO_ROOT = Path(__file__).resolve().parents[2]


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_sample_config_valid():
    sample = yaml.safe_load((REPO_ROOT / "config" / "extract.yml").read_text(encoding="utf-8"))
    jsonschema.validate(sample, _schema())


def test_empty_config_valid():
    jsonschema.validate({}, _schema())


def test_unknown_extension_rejected():
    with pytest.raises(ValidationError):
        jsonschema.validate({"allowed_extensions": [".xls"]}, _schema())


def test_server_port_range():
    with pytest.raises(ValidationError):
        jsonschema.validate({"server": {"port": 70000}}, _schema())
