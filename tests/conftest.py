from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Mapping, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SANDBOX_HOME = ROOT / ".test_place" / "global-home"
os.environ.setdefault("LEDGERNET_HOME", str(SANDBOX_HOME))
SANDBOX_HOME.mkdir(parents=True, exist_ok=True)
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ledgernet.domain.topology import Topology, load_topology  # noqa: E402
from ledgernet.ports.orchestrator import OneOffInvocation, Orchestrator  # noqa: E402
from ledgernet.settings import RuntimeSettings  # noqa: E402


class RecordingOrchestrator(Orchestrator):
    """Orchestrator double that records every call instead of spawning processes."""

    def __init__(self, exit_codes: Mapping[str, int] | None = None, host: str = "172.17.0.1") -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.exit_codes = dict(exit_codes or {})
        self.host = host

    def _record(self, name: str, **details: Any) -> int:
        self.calls.append((name, details))
        return self.exit_codes.get(name, 0)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def last(self, name: str) -> dict[str, Any]:
        for call_name, details in reversed(self.calls):
            if call_name == name:
                return details
        raise AssertionError(f"{name} was never called")

    def up(self, services: Sequence[str], env: Mapping[str, str], *, detached: bool = True) -> int:
        return self._record("up", services=list(services), env=dict(env), detached=detached)

    def logs(self, services: Sequence[str], env: Mapping[str, str], *, follow: bool = True) -> int:
        return self._record("logs", services=list(services), env=dict(env), follow=follow)

    def stop(self, env: Mapping[str, str]) -> int:
        return self._record("stop", env=dict(env))

    def down(self, env: Mapping[str, str], *, remove_volumes: bool = True) -> int:
        return self._record("down", env=dict(env), remove_volumes=remove_volumes)

    def build_image(
        self,
        tag: str,
        env: Mapping[str, str],
        *,
        no_cache: bool = False,
        build_args: Mapping[str, str] | None = None,
    ) -> int:
        return self._record("build_image", tag=tag, no_cache=no_cache, build_args=dict(build_args or {}))

    def run_one_off(self, invocation: OneOffInvocation, env: Mapping[str, str]) -> int:
        return self._record("run_one_off", invocation=invocation, env=dict(env))

    def docker_host(self, env: Mapping[str, str]) -> str:
        self.calls.append(("docker_host", {}))
        return env.get("DOCKERHOST") or self.host


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "von-network"
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture()
def runtime_settings(tmp_path: Path, project_dir: Path) -> RuntimeSettings:
    home = tmp_path / "home"
    log_dir = home / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return RuntimeSettings(home_dir=home, log_dir=log_dir, project_dir=project_dir)


@pytest.fixture()
def topology(project_dir: Path) -> Topology:
    return load_topology(project_dir)


@pytest.fixture()
def orchestrator() -> RecordingOrchestrator:
    return RecordingOrchestrator()
