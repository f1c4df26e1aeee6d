"""Domain model of the ledger network driver."""

from .commands import CommandKind, UnknownCommandError
from .environment import EnvironmentSnapshot, IdentityKind, NetworkIdentity
from .escaping import EscapedCommand, escape_arguments, unescape_argument
from .topology import Topology, TopologyError, load_topology
from .volumes import MountSpec, build_volume_specs

__all__ = [
    "CommandKind",
    "EnvironmentSnapshot",
    "EscapedCommand",
    "IdentityKind",
    "MountSpec",
    "NetworkIdentity",
    "Topology",
    "TopologyError",
    "UnknownCommandError",
    "build_volume_specs",
    "escape_arguments",
    "load_topology",
    "unescape_argument",
]
