"""Lightweight telemetry events (opt-out)."""

from __future__ import annotations

import json
import os
import time
from pathlib import Path
from typing import Any

import jsonschema

from ledgernet.resources import load_telemetry_schema
from ledgernet.settings import RuntimeSettings

LEVELS = {"info", "warn", "error"}
TELEMETRY_FILE = "telemetry.jsonl"

_DISABLE_VALUES = {"0", "false", "no", "off"}

_TELEMETRY_VALIDATOR = None


def telemetry_enabled() -> bool:
    value = os.getenv("LEDGERNET_TELEMETRY", "1").lower()
    return value not in _DISABLE_VALUES


def telemetry_path(settings: RuntimeSettings) -> Path:
    return settings.log_dir / TELEMETRY_FILE


def record_structured_event(
    settings: RuntimeSettings,
    event: str,
    *,
    payload: dict[str, Any] | None = None,
    level: str = "info",
    status: str | None = None,
    component: str | None = None,
    duration_ms: float | None = None,
) -> None:
    """Append one schema-checked record to the telemetry log.

    Invalid records raise ``ValueError`` (or ``jsonschema.ValidationError``)
    before anything is written.
    """

    if not telemetry_enabled():
        return
    record: dict[str, Any] = {
        "ts": time.time(),
        "event": event,
        "payload": payload or {},
        "level": level,
    }
    if status:
        record["status"] = status
    if component:
        record["component"] = component
    if duration_ms is not None:
        record["durationMs"] = duration_ms
    _validate_record(record)
    _telemetry_validator().validate(record)
    log_path = telemetry_path(settings)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(record, ensure_ascii=False) + "\n")


def _validate_record(record: dict[str, Any]) -> None:
    if not isinstance(record.get("event"), str) or not record["event"].strip():
        raise ValueError("Telemetry event must have non-empty string 'event'")
    if not isinstance(record.get("payload"), dict):
        raise ValueError("Telemetry payload must be a dict")
    if record["level"] not in LEVELS:
        raise ValueError(f"Telemetry level '{record['level']}' is not supported")
    duration = record.get("durationMs")
    if duration is not None and (not isinstance(duration, (int, float)) or duration < 0):
        raise ValueError("Telemetry durationMs must be a non-negative number")


def _telemetry_validator() -> jsonschema.Draft202012Validator:  # pragma: no cover - trivial cache
    global _TELEMETRY_VALIDATOR
    if _TELEMETRY_VALIDATOR is None:
        _TELEMETRY_VALIDATOR = jsonschema.Draft202012Validator(load_telemetry_schema())
    return _TELEMETRY_VALIDATOR
