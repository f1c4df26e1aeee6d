from __future__ import annotations

import json

import jsonschema
import pytest

from ledgernet.settings import RuntimeSettings
from ledgernet.utils.telemetry import record_structured_event, telemetry_path


def _read_events(settings: RuntimeSettings) -> list[dict]:
    path = telemetry_path(settings)
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def test_records_are_appended_as_json_lines(runtime_settings: RuntimeSettings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEDGERNET_TELEMETRY", "1")
    record_structured_event(runtime_settings, "dispatch", payload={"command": "stop"})
    record_structured_event(runtime_settings, "dispatch", payload={}, level="error", status="fail", duration_ms=1.5)
    events = _read_events(runtime_settings)
    assert [event["level"] for event in events] == ["info", "error"]
    assert events[0]["payload"] == {"command": "stop"}
    assert events[1]["durationMs"] == 1.5
    assert telemetry_path(runtime_settings).parent == runtime_settings.log_dir


def test_disabled_telemetry_writes_nothing(runtime_settings: RuntimeSettings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEDGERNET_TELEMETRY", "off")
    record_structured_event(runtime_settings, "dispatch", payload={"command": "stop"})
    assert _read_events(runtime_settings) == []


def test_invalid_records_rejected(runtime_settings: RuntimeSettings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LEDGERNET_TELEMETRY", "1")
    with pytest.raises(ValueError):
        record_structured_event(runtime_settings, "", payload={})
    with pytest.raises(ValueError):
        record_structured_event(runtime_settings, "dispatch", level="debug")
    with pytest.raises(ValueError):
        record_structured_event(runtime_settings, "dispatch", duration_ms=-1)
    assert _read_events(runtime_settings) == []


def test_schema_rejects_unknown_fields() -> None:
    from ledgernet.resources import load_telemetry_schema

    validator = jsonschema.Draft202012Validator(load_telemetry_schema())
    with pytest.raises(jsonschema.ValidationError):
        validator.validate({"ts": 1.0, "event": "x", "payload": {}, "level": "info", "extra": True})
