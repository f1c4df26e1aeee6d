"""Host-to-container volume mount specifications for the client container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

SEPARATORS = "/\\"
MOUNT_OPTIONS = "Z"


@dataclass(frozen=True)
class MountSpec:
    host_path: str
    mount_name: str
    container_path: str

    def clause(self) -> str:
        return f"{self.host_path}:{self.container_path}:{MOUNT_OPTIONS}"


def mount_name_for(path: str) -> str:
    trimmed = path.rstrip(SEPARATORS)
    for sep in SEPARATORS:
        trimmed = trimmed.rsplit(sep, 1)[-1]
    return trimmed


def _mount_spec(path: str, container_home: str, path_translating: bool) -> MountSpec:
    host_path = path.rstrip(SEPARATORS)
    name = mount_name_for(host_path)
    if path_translating:
        host_path = "/" + host_path
    return MountSpec(
        host_path=host_path,
        mount_name=name,
        container_path=f"{container_home.rstrip('/')}/{name}",
    )


def build_volume_specs(
    path_list: str | None,
    default_path: Path | None,
    *,
    container_home: str,
    path_translating: bool = False,
) -> tuple[MountSpec, ...]:
    """Return one mount per comma-separated path, falling back to ``default_path``.

    The default is only used when ``path_list`` is empty and the directory
    exists; it is mounted by its canonical absolute path. Blank entries and
    entries that are only separators are skipped. No paths at all is not an
    error, the client simply runs without extra mounts.
    """

    raw = (path_list or "").strip()
    if not raw and default_path is not None and default_path.is_dir():
        raw = str(default_path.resolve())
    if not raw:
        return ()
    specs = []
    for entry in raw.split(","):
        entry = entry.strip()
        # A bare root has no final segment to mount under the container home.
        if not entry or not mount_name_for(entry):
            continue
        specs.append(_mount_spec(entry, container_home, path_translating))
    return tuple(specs)


__all__ = ["MountSpec", "build_volume_specs", "mount_name_for"]
