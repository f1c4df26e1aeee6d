"""Port definitions for the container orchestration engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping, Sequence

from ledgernet.domain.escaping import EscapedCommand
from ledgernet.domain.volumes import MountSpec


@dataclass(frozen=True)
class OneOffInvocation:
    """Fully-formed request to run a short-lived container for one command."""

    service: str
    entrypoint: str
    command: EscapedCommand
    mounts: tuple[MountSpec, ...] = ()

    def mount_clauses(self) -> list[str]:
        return [spec.clause() for spec in self.mounts]

    def container_argv(self) -> list[str]:
        return [self.entrypoint, *self.command.argv()]


class Orchestrator(ABC):
    """Operations the driver needs from the orchestration engine.

    Every call blocks until the child process exits and returns its exit
    code unchanged.
    """

    @abstractmethod
    def up(self, services: Sequence[str], env: Mapping[str, str], *, detached: bool = True) -> int:
        """Bring the named services up."""

    @abstractmethod
    def logs(self, services: Sequence[str], env: Mapping[str, str], *, follow: bool = True) -> int:
        """Stream logs; an empty ``services`` means every service."""

    @abstractmethod
    def stop(self, env: Mapping[str, str]) -> int:
        """Stop all services, keeping their state."""

    @abstractmethod
    def down(self, env: Mapping[str, str], *, remove_volumes: bool = True) -> int:
        """Stop and remove all services, optionally with their volumes."""

    @abstractmethod
    def build_image(
        self,
        tag: str,
        env: Mapping[str, str],
        *,
        no_cache: bool = False,
        build_args: Mapping[str, str] | None = None,
    ) -> int:
        """Build the network base image."""

    @abstractmethod
    def run_one_off(self, invocation: OneOffInvocation, env: Mapping[str, str]) -> int:
        """Run ``invocation`` in a throwaway container."""

    @abstractmethod
    def docker_host(self, env: Mapping[str, str]) -> str:
        """Return the address containers use to reach the host."""


__all__ = ["OneOffInvocation", "Orchestrator"]
