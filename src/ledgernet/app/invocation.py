"""Builds one-off client container invocations for ``cli`` and ``indy-cli``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from ledgernet.app.environment_service import EnvironmentResolver, ResolvedEnvironment
from ledgernet.domain.commands import CommandKind
from ledgernet.domain.environment import split_assignment
from ledgernet.domain.escaping import EscapedCommand
from ledgernet.domain.topology import Topology
from ledgernet.domain.volumes import build_volume_specs
from ledgernet.ports.orchestrator import OneOffInvocation


class CliUsageError(RuntimeError):
    """Raised when ``cli`` is called without a sub-command."""


@dataclass(frozen=True)
class BuiltInvocation:
    invocation: OneOffInvocation
    environment: ResolvedEnvironment


class InvocationBuilder:
    def __init__(
        self,
        topology: Topology,
        resolver: EnvironmentResolver,
        *,
        project_dir: Path,
        path_translating: bool = False,
    ) -> None:
        self._topology = topology
        self._resolver = resolver
        self._project_dir = project_dir
        self._path_translating = path_translating

    def build(
        self,
        kind: CommandKind,
        persisted: dict[str, str],
        raw_args: Sequence[str],
        volume_override: str | None = None,
    ) -> BuiltInvocation:
        resolved = self._resolver.resolve(persisted, raw_args)
        sub_command, arguments = self._split_command(kind, raw_args)
        mounts = build_volume_specs(
            volume_override,
            self._topology.default_script_dir(self._project_dir),
            container_home=self._topology.container_home,
            path_translating=self._path_translating,
        )
        invocation = OneOffInvocation(
            service=self._topology.cli_service,
            entrypoint=self._topology.cli_entrypoint,
            command=EscapedCommand.of(sub_command, arguments),
            mounts=mounts,
        )
        return BuiltInvocation(invocation=invocation, environment=resolved)

    def _split_command(self, kind: CommandKind, raw_args: Sequence[str]) -> tuple[list[str], list[str]]:
        """Take the first positional out as the sub-command.

        Everything else, ``key=value`` tokens included, stays in caller order
        and is forwarded to the client container; the nested driver reads its
        own assignments from there.
        """

        remainder = list(raw_args)
        head = next((i for i, token in enumerate(remainder) if split_assignment(token) is None), None)
        leading = [] if head is None else [remainder.pop(head)]
        if kind is CommandKind.INDY_CLI:
            return [self._topology.indy_cli_command, *leading], remainder
        if kind is CommandKind.CLI:
            if not leading:
                raise CliUsageError("cli requires a sub-command")
            return leading, remainder
        raise ValueError(f"{kind.value} does not run a one-off client container")


__all__ = ["BuiltInvocation", "CliUsageError", "InvocationBuilder"]
