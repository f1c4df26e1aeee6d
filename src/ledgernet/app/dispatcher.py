"""Command dispatch for the ledger network driver."""

from __future__ import annotations

import os
import time
from dataclasses import dataclass, replace
from functools import partial
from typing import Callable, Dict, List, Mapping, Sequence

from ledgernet.app.environment_service import (
    EnvironmentResolver,
    ResolvedEnvironment,
    read_persisted_entries,
)
from ledgernet.app.invocation import InvocationBuilder
from ledgernet.domain.commands import CommandKind
from ledgernet.domain.topology import Topology
from ledgernet.ports.orchestrator import Orchestrator
from ledgernet.settings import RuntimeSettings
from ledgernet.utils.telemetry import record_structured_event

PROXY_VARIABLES = ("http_proxy", "https_proxy", "no_proxy", "HTTP_PROXY", "HTTPS_PROXY", "NO_PROXY")


@dataclass
class DispatchStep:
    name: str
    run: Callable[[], int]


class CommandDispatcher:
    """Maps each :class:`CommandKind` to its fixed sequence of orchestration calls."""

    def __init__(
        self,
        settings: RuntimeSettings,
        orchestrator: Orchestrator,
        topology: Topology,
        *,
        inherited: Mapping[str, str] | None = None,
    ) -> None:
        self._settings = settings
        self._orchestrator = orchestrator
        self._topology = topology
        self._inherited = dict(os.environ if inherited is None else inherited)
        self._resolver = EnvironmentResolver(self._inherited)
        self._invocations = InvocationBuilder(
            topology,
            self._resolver,
            project_dir=settings.project_dir,
            path_translating=settings.path_translating,
        )
        self._handlers: Dict[CommandKind, Callable[[List[str], str | None], List[DispatchStep]]] = {
            CommandKind.START: self._start,
            CommandKind.START_COMBINED: self._start_combined,
            CommandKind.START_WEB: self._start_web,
            CommandKind.SYNCTEST: self._synctest,
            CommandKind.LOGS: self._logs,
            CommandKind.STOP: self._stop,
            CommandKind.DOWN: self._down,
            CommandKind.BUILD: self._build,
            CommandKind.REBUILD: partial(self._build, no_cache=True),
            CommandKind.DOCKERHOST: self._dockerhost,
            CommandKind.CLI: partial(self._client, CommandKind.CLI),
            CommandKind.INDY_CLI: partial(self._client, CommandKind.INDY_CLI),
        }

    def dispatch(self, kind: CommandKind, args: Sequence[str], *, volumes: str | None = None) -> int:
        started = time.perf_counter()
        steps = self._handlers[kind](list(args), volumes)
        exit_code = 0
        for step in steps:
            exit_code = step.run()
            if exit_code != 0:
                break
        record_structured_event(
            self._settings,
            "dispatch",
            payload={
                "command": kind.value,
                "steps": [step.name for step in steps],
                "project": str(self._settings.project_dir),
                "exit_code": exit_code,
            },
            level="info" if exit_code == 0 else "error",
            status="ok" if exit_code == 0 else "fail",
            component="dispatcher",
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        return exit_code

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    def resolve(self, args: Sequence[str]) -> ResolvedEnvironment:
        return self._resolver.resolve_file(self._settings.env_file, args)

    def _child_env(self, resolved: ResolvedEnvironment) -> dict[str, str]:
        snapshot = resolved.snapshot
        if not self._is_set(resolved, "DOCKERHOST"):
            host = self._orchestrator.docker_host(self._resolver.child_environment(snapshot))
            snapshot = snapshot.with_values(DOCKERHOST=host)
        return self._resolver.child_environment(snapshot)

    def _is_set(self, resolved: ResolvedEnvironment, key: str) -> bool:
        return bool(resolved.snapshot.get(key) or self._inherited.get(key))

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _bring_up_and_follow(
        self, resolved: ResolvedEnvironment, services: Sequence[str], log_services: Sequence[str]
    ) -> List[DispatchStep]:
        env = self._child_env(resolved)
        return [
            DispatchStep("up", lambda: self._orchestrator.up(services, env, detached=True)),
            DispatchStep("logs", lambda: self._orchestrator.logs(log_services, env, follow=True)),
        ]

    def _start(self, args: List[str], _volumes: str | None) -> List[DispatchStep]:
        return self._bring_up_and_follow(self.resolve(args), self._topology.network_services, ())

    def _start_combined(self, args: List[str], _volumes: str | None) -> List[DispatchStep]:
        services = (self._topology.web_service, self._topology.combined_service)
        return self._bring_up_and_follow(self.resolve(args), services, ())

    def _start_web(self, args: List[str], _volumes: str | None) -> List[DispatchStep]:
        web = (self._topology.web_service,)
        resolved = self.resolve(args)
        if not self._is_set(resolved, "LEDGER_SEED"):
            resolved = replace(resolved, snapshot=resolved.snapshot.with_values(ANONYMOUS="1"))
        return self._bring_up_and_follow(resolved, web, web)

    def _synctest(self, args: List[str], _volumes: str | None) -> List[DispatchStep]:
        synctest = self._topology.synctest_service
        return self._bring_up_and_follow(self.resolve(args), (synctest, *self._topology.node_services), (synctest,))

    def _logs(self, args: List[str], _volumes: str | None) -> List[DispatchStep]:
        env = self._child_env(self.resolve(args))
        return [DispatchStep("logs", lambda: self._orchestrator.logs((), env, follow=True))]

    def _stop(self, args: List[str], _volumes: str | None) -> List[DispatchStep]:
        env = self._child_env(self.resolve(args))
        return [DispatchStep("stop", lambda: self._orchestrator.stop(env))]

    def _down(self, args: List[str], _volumes: str | None) -> List[DispatchStep]:
        env = self._child_env(self.resolve(args))
        return [DispatchStep("down", lambda: self._orchestrator.down(env, remove_volumes=True))]

    def _build(self, _args: List[str], _volumes: str | None, *, no_cache: bool = False) -> List[DispatchStep]:
        env = dict(self._inherited)
        build_args = {key: env[key] for key in PROXY_VARIABLES if env.get(key)}
        return [
            DispatchStep(
                "rebuild" if no_cache else "build",
                lambda: self._orchestrator.build_image(
                    self._topology.image, env, no_cache=no_cache, build_args=build_args
                ),
            )
        ]

    def _dockerhost(self, _args: List[str], _volumes: str | None) -> List[DispatchStep]:
        def report() -> int:
            host = self._orchestrator.docker_host(self._inherited)
            print(f"Dockerhost ip: {host}")
            return 0

        return [DispatchStep("dockerhost", report)]

    def _client(self, kind: CommandKind, args: List[str], volumes: str | None) -> List[DispatchStep]:
        persisted = read_persisted_entries(self._settings.env_file)
        built = self._invocations.build(kind, persisted, args, volumes)
        env = self._child_env(built.environment)
        return [DispatchStep("run", lambda: self._orchestrator.run_one_off(built.invocation, env))]


__all__ = ["CommandDispatcher", "DispatchStep", "PROXY_VARIABLES"]
