"""Packaged resources for ledgernet."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Dict

import yaml

__all__ = ["load_default_topology", "load_telemetry_schema"]


@lru_cache(maxsize=1)
def load_default_topology() -> Dict[str, Any]:
    """Return the service topology shipped with the package."""

    raw = (resources.files(__name__) / "topology.yaml").read_text("utf-8")
    return yaml.safe_load(raw) or {}


@lru_cache(maxsize=1)
def load_telemetry_schema() -> Dict[str, Any]:
    raw = (resources.files(__name__) / "telemetry.schema.json").read_text("utf-8")
    return json.loads(raw)
