"""Environment snapshot, argument classification and network identity parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping

# Same check the shell driver used: four dot-separated 1-3 digit groups at
# the start of the token, without octet bounds checks.
ADDRESS_PATTERN = re.compile(r"[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}")

IP_KEY = "IP"
IPS_KEY = "IPS"


class IdentityKind(str, Enum):
    SINGLE = "single"
    ADDRESS_SET = "address_set"
    ABSENT = "absent"


@dataclass(frozen=True)
class NetworkIdentity:
    """Typed result of parsing the first positional token for node addresses.

    ``value`` is the token exactly as the caller wrote it; an address set
    keeps its comma-joined text.
    """

    kind: IdentityKind
    value: str = ""

    @classmethod
    def absent(cls) -> "NetworkIdentity":
        return cls(kind=IdentityKind.ABSENT)

    def as_environment(self) -> dict[str, str]:
        """Both keys, always; the one this identity does not carry is blank."""
        return {
            IP_KEY: self.value if self.kind is IdentityKind.SINGLE else "",
            IPS_KEY: self.value if self.kind is IdentityKind.ADDRESS_SET else "",
        }


def parse_network_identity(token: str | None) -> NetworkIdentity:
    if not token or not ADDRESS_PATTERN.match(token):
        return NetworkIdentity.absent()
    if "," in token:
        return NetworkIdentity(kind=IdentityKind.ADDRESS_SET, value=token)
    return NetworkIdentity(kind=IdentityKind.SINGLE, value=token)


def split_assignment(token: str) -> tuple[str, str] | None:
    key, sep, value = token.partition("=")
    if not sep or not key:
        return None
    return key, value


def classify_arguments(tokens: Iterable[str]) -> tuple[dict[str, str], list[str]]:
    """Partition ``tokens`` into ``key=value`` assignments and ordered positionals."""

    assignments: dict[str, str] = {}
    positionals: list[str] = []
    for token in tokens:
        pair = split_assignment(token)
        if pair is None:
            positionals.append(token)
            continue
        key, value = pair
        assignments[key] = value
    return assignments, positionals


def parse_persisted_entries(lines: Iterable[str]) -> dict[str, str]:
    """Read ``key=value`` lines; comments and lines without ``=`` are skipped.

    Values are taken verbatim, carriage returns aside. No quote or escape
    handling is applied.
    """

    entries: dict[str, str] = {}
    for raw_line in lines:
        line = raw_line.replace("\r", "").rstrip("\n")
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        pair = split_assignment(stripped)
        if pair is None:
            continue
        key, value = pair
        entries[key.strip()] = value
    return entries


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Immutable view of every variable visible to a single invocation."""

    values: Mapping[str, str] = field(default_factory=dict)
    identity: NetworkIdentity = field(default_factory=NetworkIdentity.absent)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.values.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def with_values(self, **updates: str) -> "EnvironmentSnapshot":
        merged = dict(self.values)
        merged.update(updates)
        return EnvironmentSnapshot(values=merged, identity=self.identity)

    def with_defaults(
        self, defaults: Mapping[str, str], inherited: Mapping[str, str] | None = None
    ) -> "EnvironmentSnapshot":
        """Fill keys that neither the snapshot nor ``inherited`` sets to a non-empty value."""

        inherited = inherited or {}
        merged = dict(self.values)
        for key, value in defaults.items():
            if merged.get(key) or inherited.get(key):
                continue
            merged[key] = value
        return EnvironmentSnapshot(values=merged, identity=self.identity)

    def as_environ(self, base: Mapping[str, str] | None = None) -> dict[str, str]:
        # IP/IPS always come from this invocation, never from the caller's shell.
        env = dict(base or {})
        env.update(self.identity.as_environment())
        env.update(self.values)
        return env


__all__ = [
    "ADDRESS_PATTERN",
    "EnvironmentSnapshot",
    "IdentityKind",
    "NetworkIdentity",
    "classify_arguments",
    "parse_network_identity",
    "parse_persisted_entries",
    "split_assignment",
]
