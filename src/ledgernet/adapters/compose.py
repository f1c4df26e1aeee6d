"""Orchestrator backed by the docker-compose and docker executables."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Mapping, Sequence

from ledgernet.ports.orchestrator import OneOffInvocation, Orchestrator

DEFAULT_DOCKER_HOST = "host.docker.internal"
BRIDGE_GATEWAY_FORMAT = "{{(index .IPAM.Config 0).Gateway}}"


class OrchestrationError(RuntimeError):
    """Raised when an orchestration executable cannot be launched."""


class ComposeOrchestrator(Orchestrator):
    def __init__(
        self,
        compose_command: Sequence[str] = ("docker-compose",),
        docker_command: Sequence[str] = ("docker",),
        *,
        build_context: str = ".",
        platform: str | None = None,
        working_dir: Path | None = None,
    ) -> None:
        self._compose = list(compose_command)
        self._docker = list(docker_command)
        self._build_context = build_context
        self._platform = platform or sys.platform
        self._working_dir = working_dir

    def up(self, services: Sequence[str], env: Mapping[str, str], *, detached: bool = True) -> int:
        args = ["up"]
        if detached:
            args.append("-d")
        return self._compose_run([*args, *services], env)

    def logs(self, services: Sequence[str], env: Mapping[str, str], *, follow: bool = True) -> int:
        args = ["logs"]
        if follow:
            args.append("-f")
        try:
            return self._compose_run([*args, *services], env)
        except KeyboardInterrupt:
            # Ctrl-C is how log streaming is meant to end.
            return 0

    def stop(self, env: Mapping[str, str]) -> int:
        return self._compose_run(["stop"], env)

    def down(self, env: Mapping[str, str], *, remove_volumes: bool = True) -> int:
        args = ["down"]
        if remove_volumes:
            args.append("-v")
        return self._compose_run(args, env)

    def build_image(
        self,
        tag: str,
        env: Mapping[str, str],
        *,
        no_cache: bool = False,
        build_args: Mapping[str, str] | None = None,
    ) -> int:
        args = ["build"]
        if no_cache:
            args.append("--no-cache")
        for key, value in (build_args or {}).items():
            args.extend(["--build-arg", f"{key}={value}"])
        args.extend(["-t", tag, self._build_context])
        return self._execute(self._docker + args, env)

    def run_one_off(self, invocation: OneOffInvocation, env: Mapping[str, str]) -> int:
        args = ["run", "--rm"]
        for clause in invocation.mount_clauses():
            args.extend(["-v", clause])
        args.append(invocation.service)
        args.extend(invocation.container_argv())
        return self._compose_run(args, env)

    def docker_host(self, env: Mapping[str, str]) -> str:
        configured = env.get("DOCKERHOST", "").strip()
        if configured:
            return configured
        if not self._platform.startswith("linux"):
            return DEFAULT_DOCKER_HOST
        argv = self._docker + ["network", "inspect", "bridge", "--format", BRIDGE_GATEWAY_FORMAT]
        try:
            result = subprocess.run(argv, env=dict(env), cwd=self._working_dir, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise self._missing(argv) from exc
        gateway = result.stdout.strip()
        if result.returncode != 0 or not gateway:
            return DEFAULT_DOCKER_HOST
        return gateway

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _compose_run(self, args: list[str], env: Mapping[str, str]) -> int:
        return self._execute(self._compose + args, env)

    def _execute(self, argv: list[str], env: Mapping[str, str]) -> int:
        try:
            result = subprocess.run(argv, env=dict(env), cwd=self._working_dir)
        except FileNotFoundError as exc:
            raise self._missing(argv) from exc
        return result.returncode

    @staticmethod
    def _missing(argv: list[str]) -> OrchestrationError:
        executable = argv[0] if argv else "<unknown>"
        return OrchestrationError(
            f"Orchestration executable missing: {executable}. "
            "Install docker / docker-compose or set LEDGERNET_COMPOSE (e.g. 'docker compose')."
        )


__all__ = ["ComposeOrchestrator", "OrchestrationError"]
