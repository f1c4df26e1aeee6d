"""Service topology of the ledger test network."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

TOPOLOGY_DESCRIPTOR = "ledgernet.yaml"


class TopologyError(RuntimeError):
    """Raised when a topology descriptor is malformed."""


@dataclass(frozen=True)
class Topology:
    image: str
    container_home: str
    web_service: str
    node_services: tuple[str, ...]
    combined_service: str
    synctest_service: str
    cli_service: str
    cli_entrypoint: str
    cli_script_dir: str
    indy_cli_command: str

    @property
    def network_services(self) -> tuple[str, ...]:
        return (self.web_service, *self.node_services)

    def default_script_dir(self, project_dir: Path) -> Path:
        return project_dir / self.cli_script_dir

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Topology":
        services = data.get("services", {})
        cli = data.get("cli", {})
        if not isinstance(services, Mapping) or not isinstance(cli, Mapping):
            raise TopologyError("Invalid topology: 'services' and 'cli' must be mappings")
        nodes = services.get("nodes", [])
        if isinstance(nodes, str) or not isinstance(nodes, list) or not all(isinstance(n, str) for n in nodes):
            raise TopologyError("Invalid topology: services.nodes must be a list of strings")
        try:
            return cls(
                image=_text(data, "image"),
                container_home=_text(data, "container_home"),
                web_service=_text(services, "web"),
                node_services=tuple(nodes),
                combined_service=_text(services, "combined"),
                synctest_service=_text(services, "synctest"),
                cli_service=_text(cli, "service"),
                cli_entrypoint=_text(cli, "entrypoint"),
                cli_script_dir=_text(cli, "script_dir"),
                indy_cli_command=_text(cli, "indy_cli_command"),
            )
        except KeyError as exc:
            raise TopologyError(f"Invalid topology: missing key {exc.args[0]}") from exc


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str) or not value.strip():
        raise TopologyError(f"Invalid topology: {key} must be a non-empty string")
    return value


def _merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _merge(dict(merged[key]), value)
        else:
            merged[key] = value
    return merged


def load_topology(project_dir: Path) -> Topology:
    """Packaged defaults, overridden key by key by ``<project>/ledgernet.yaml``."""

    import yaml  # lazy import to keep import cost low

    from ledgernet.resources import load_default_topology

    data = dict(load_default_topology())
    descriptor = project_dir / TOPOLOGY_DESCRIPTOR
    if descriptor.exists():
        override = yaml.safe_load(descriptor.read_text("utf-8")) or {}
        if not isinstance(override, Mapping):
            raise TopologyError(f"Invalid {descriptor}: top level must be a mapping")
        data = _merge(data, override)
    return Topology.from_mapping(data)


__all__ = ["TOPOLOGY_DESCRIPTOR", "Topology", "TopologyError", "load_topology"]
