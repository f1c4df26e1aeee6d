"""Application services of the ledger network driver."""

from .dispatcher import CommandDispatcher  # noqa: F401
from .environment_service import EnvironmentFileError, EnvironmentResolver  # noqa: F401
from .invocation import CliUsageError, InvocationBuilder  # noqa: F401

__all__ = [
    "CliUsageError",
    "CommandDispatcher",
    "EnvironmentFileError",
    "EnvironmentResolver",
    "InvocationBuilder",
]
