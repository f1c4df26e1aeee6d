#!/usr/bin/env python3
"""Entry point for the ledgernet CLI."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from textwrap import dedent
from typing import NoReturn

from ledgernet import __version__
from ledgernet.adapters.compose import ComposeOrchestrator, OrchestrationError
from ledgernet.app.dispatcher import CommandDispatcher
from ledgernet.app.environment_service import EnvironmentFileError
from ledgernet.app.invocation import CliUsageError
from ledgernet.domain.commands import CommandKind, UnknownCommandError
from ledgernet.domain.topology import TopologyError, load_topology
from ledgernet.ports.orchestrator import Orchestrator
from ledgernet.settings import SETTINGS, RuntimeSettings

PROG = "ledgernet"

USAGE = dedent(
    f"""
    Usage: {PROG} [-v <paths>] [-h] [--project-dir <dir>] <command> [key=value ...] [options]

    Options:
      -v <paths>  Comma-separated host directories mounted into the client
                  container (cli / indy-cli only). Defaults to ./cli-scripts
                  when that directory exists.
      -h          Print this help and exit.

    Commands:
      start | up      Start the web server and all ledger nodes, then follow the logs.
                      $ {PROG} start [ip|ip,ip,...] [key=value ...]
      start-combined  Same as start, using the combined nodes service.
      start-web       Start only the web server and follow its logs. Without
                      LEDGER_SEED the web server runs anonymously.
                      $ {PROG} start-web GENESIS_URL=http://host:9000/genesis LEDGER_SEED=...
      synctest        Start the nodes and the sync test service; follow the sync test logs.
      logs            Follow the logs of all running services.
      stop            Stop all services; ledger data is kept.
      down | rm       Stop all services and delete their volumes (ledger data).
      build           Build the network base image.
      rebuild         Build the network base image without the cache.
      dockerhost      Print the address containers use to reach this host.
      cli             Run a client script in a one-off container.
                      $ {PROG} cli <sub-command> [args ...]
      indy-cli        Run indy-cli in a one-off container.
                      $ {PROG} indy-cli [sub-command] [key=value ...] [args ...]

    Environment:
      Values are read from .env in the project directory, then from
      key=value arguments. LOG_LEVEL (info), RUST_LOG (warning) and
      COMPOSE_PROJECT_NAME (von) are defaulted when unset.
    """
).strip("\n")

CLI_USAGE = dedent(
    f"""
    Usage: {PROG} [-v <paths>] cli <sub-command> [key=value ...] [args ...]

    Runs ./scripts/manage <sub-command> inside the client container, with
    every mounted directory available under the container home.
    Example:
      $ {PROG} -v ./cli-scripts cli indy-cli create-wallet walletName=trustee
    """
).strip("\n")


class UsageError(RuntimeError):
    """Raised by the argument parser instead of exiting."""


class _UsageParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _UsageParser(prog=PROG, add_help=False, allow_abbrev=False)
    parser.add_argument("-v", dest="volumes", metavar="PATHS", help="Comma-separated client volume paths")
    parser.add_argument("-h", dest="help", action="store_true", help="Print usage and exit")
    parser.add_argument("--project-dir", dest="project_dir", help="Network project directory (default: cwd)")
    parser.add_argument("--version", action="version", version=f"{PROG} {__version__}")
    parser.add_argument("command", nargs="?")
    parser.add_argument("args", nargs=argparse.REMAINDER)
    return parser


def _usage(text: str = USAGE) -> int:
    print(text)
    return 1


def _fail(message: str) -> int:
    print(f"{PROG}: {message}", file=sys.stderr)
    return 2


def _build_orchestrator(settings: RuntimeSettings) -> Orchestrator:
    return ComposeOrchestrator(settings.compose_command, working_dir=settings.project_dir)


def _build_dispatcher(settings: RuntimeSettings) -> CommandDispatcher:
    topology = load_topology(settings.project_dir)
    return CommandDispatcher(settings, _build_orchestrator(settings), topology)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    except UsageError:
        return _usage()
    if args.help:
        return _usage()
    try:
        kind = CommandKind.from_name(args.command)
    except UnknownCommandError:
        return _usage()

    settings = SETTINGS
    if args.project_dir:
        settings = SETTINGS.for_project(Path(args.project_dir))

    try:
        dispatcher = _build_dispatcher(settings)
        return dispatcher.dispatch(kind, list(args.args), volumes=args.volumes)
    except CliUsageError:
        return _usage(CLI_USAGE)
    except (EnvironmentFileError, TopologyError, OrchestrationError) as exc:
        return _fail(str(exc))


if __name__ == "__main__":
    sys.exit(main())
