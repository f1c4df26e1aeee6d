"""Builds the environment snapshot used by every dispatched command."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

from ledgernet.domain.environment import (
    EnvironmentSnapshot,
    classify_arguments,
    parse_network_identity,
    parse_persisted_entries,
)

DEFAULTS: dict[str, str] = {
    "LOG_LEVEL": "info",
    "RUST_LOG": "warning",
    "COMPOSE_PROJECT_NAME": "von",
}


class EnvironmentFileError(OSError):
    """Raised when the persisted configuration exists but cannot be read."""


@dataclass(frozen=True)
class ResolvedEnvironment:
    snapshot: EnvironmentSnapshot
    positionals: list[str] = field(default_factory=list)
    assignments: dict[str, str] = field(default_factory=dict)


def read_persisted_entries(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise EnvironmentFileError(f"Cannot read environment file {path}: {exc}") from exc
    return parse_persisted_entries(text.split("\n"))


class EnvironmentResolver:
    """Merges persisted entries, caller assignments and computed defaults.

    ``inherited`` is the caller's process environment. It never ends up in
    the snapshot; it only suppresses defaults for keys the caller already
    exported.
    """

    def __init__(self, inherited: Mapping[str, str] | None = None, defaults: Mapping[str, str] | None = None) -> None:
        self._inherited = dict(inherited or {})
        self._defaults = dict(DEFAULTS if defaults is None else defaults)

    def resolve(self, persisted: Mapping[str, str], override_args: Iterable[str]) -> ResolvedEnvironment:
        assignments, positionals = classify_arguments(override_args)
        values = dict(persisted)
        values.update(assignments)

        # IP/IPS are recomputed on every call; stale values from .env or
        # key=value arguments never survive.
        identity = parse_network_identity(positionals[0] if positionals else None)
        values.update(identity.as_environment())

        snapshot = EnvironmentSnapshot(values=values, identity=identity).with_defaults(
            self._defaults, inherited=self._inherited
        )
        return ResolvedEnvironment(snapshot=snapshot, positionals=positionals, assignments=assignments)

    def resolve_file(self, env_file: Path, override_args: Iterable[str]) -> ResolvedEnvironment:
        return self.resolve(read_persisted_entries(env_file), override_args)

    def child_environment(self, snapshot: EnvironmentSnapshot) -> dict[str, str]:
        return snapshot.as_environ(self._inherited)


__all__ = [
    "DEFAULTS",
    "EnvironmentFileError",
    "EnvironmentResolver",
    "ResolvedEnvironment",
    "read_persisted_entries",
]
