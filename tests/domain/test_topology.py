from __future__ import annotations

from pathlib import Path

import pytest

from ledgernet.domain.topology import TOPOLOGY_DESCRIPTOR, TopologyError, load_topology


def test_default_topology(tmp_path: Path) -> None:
    topology = load_topology(tmp_path)
    assert topology.web_service == "webserver"
    assert topology.node_services == ("node1", "node2", "node3", "node4")
    assert topology.network_services == ("webserver", "node1", "node2", "node3", "node4")
    assert topology.cli_service == "client"
    assert topology.container_home == "/home/indy"
    assert topology.default_script_dir(tmp_path) == tmp_path / "cli-scripts"


def test_project_descriptor_overrides_keys(tmp_path: Path) -> None:
    (tmp_path / TOPOLOGY_DESCRIPTOR).write_text(
        """
        image: my-network
        services:
          nodes: [alpha, beta]
        """,
        encoding="utf-8",
    )
    topology = load_topology(tmp_path)
    assert topology.image == "my-network"
    assert topology.node_services == ("alpha", "beta")
    assert topology.web_service == "webserver"


def test_invalid_descriptor(tmp_path: Path) -> None:
    (tmp_path / TOPOLOGY_DESCRIPTOR).write_text("services:\n  nodes: node1\n", encoding="utf-8")
    with pytest.raises(TopologyError):
        load_topology(tmp_path)


def test_descriptor_must_be_mapping(tmp_path: Path) -> None:
    (tmp_path / TOPOLOGY_DESCRIPTOR).write_text("- node1\n", encoding="utf-8")
    with pytest.raises(TopologyError):
        load_topology(tmp_path)
