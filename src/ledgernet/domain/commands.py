"""Closed set of lifecycle commands understood by the driver."""

from __future__ import annotations

from enum import Enum


class UnknownCommandError(RuntimeError):
    """Raised when a command name is not part of the command vocabulary."""


class CommandKind(str, Enum):
    START = "start"
    START_COMBINED = "start-combined"
    START_WEB = "start-web"
    SYNCTEST = "synctest"
    CLI = "cli"
    INDY_CLI = "indy-cli"
    LOGS = "logs"
    STOP = "stop"
    DOWN = "down"
    BUILD = "build"
    REBUILD = "rebuild"
    DOCKERHOST = "dockerhost"

    @classmethod
    def from_name(cls, name: str | None) -> "CommandKind":
        if not name:
            raise UnknownCommandError("No command supplied")
        canonical = ALIASES.get(name, name)
        try:
            return cls(canonical)
        except ValueError as exc:
            raise UnknownCommandError(f"Unknown command: {name}") from exc


ALIASES = {
    "up": CommandKind.START.value,
    "rm": CommandKind.DOWN.value,
}


__all__ = ["ALIASES", "CommandKind", "UnknownCommandError"]
