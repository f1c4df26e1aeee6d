"""Runtime settings for the ledgernet driver."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, replace
from pathlib import Path

from ledgernet import __version__

ENV_FILE_NAME = ".env"
DEFAULT_COMPOSE_COMMAND = ("docker-compose",)


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    log_dir: Path
    project_dir: Path
    compose_command: tuple[str, ...] = DEFAULT_COMPOSE_COMMAND
    env_file_override: Path | None = None
    path_translating: bool = False
    cli_version: str = __version__

    @property
    def env_file(self) -> Path:
        if self.env_file_override is not None:
            return self.env_file_override
        return self.project_dir / ENV_FILE_NAME

    def for_project(self, project_dir: Path) -> "RuntimeSettings":
        return replace(self, project_dir=project_dir.expanduser().resolve())


def _default_home_dir() -> Path:
    override = os.environ.get("LEDGERNET_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".ledgernet"


def _compose_command() -> tuple[str, ...]:
    raw = os.environ.get("LEDGERNET_COMPOSE", "").strip()
    if not raw:
        return DEFAULT_COMPOSE_COMMAND
    return tuple(shlex.split(raw))


def is_path_translating_host() -> bool:
    """Return True under MSYS / Git Bash, where absolute host paths need a leading ``/``."""

    if os.environ.get("MSYSTEM"):
        return True
    return os.environ.get("OSTYPE", "").lower().startswith("msys")


def load_settings(project_dir: Path | None = None) -> RuntimeSettings:
    base = _default_home_dir()
    env_file = os.environ.get("LEDGERNET_ENV_FILE")
    return RuntimeSettings(
        home_dir=base,
        log_dir=base / "logs",
        project_dir=(project_dir or Path(os.getcwd())).expanduser().resolve(),
        compose_command=_compose_command(),
        env_file_override=Path(env_file).expanduser() if env_file else None,
        path_translating=is_path_translating_host(),
    )


SETTINGS = load_settings()
