#!/usr/bin/env python3
"""
procinfra CLI - run commands and check processes.

Usage:
    procinfra run -- ls -l /tmp
    procinfra run --strict --shell -- "ps -e | wc -l"
    procinfra pid 4242
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence

import procinfra
from procinfra.cli.output import ConsoleOutput, OutputWriter
from procinfra.config import get_config, load_config, set_config
from procinfra.exceptions import InfraError, ProcessFailedError
from procinfra.log import create_lg
from procinfra.subprocess import is_pid_running, run


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procinfra", description="Run commands and capture their output"
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"procinfra {procinfra.__version__}",
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument(
        "--log-level", help="Log level (trace, debug, info, warning, error, false)"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    run_parser = sub.add_parser("run", help="Run a command and print its output")
    run_parser.add_argument(
        "--strict", action="store_true", help="Fail on a non-zero exit code"
    )
    run_parser.add_argument(
        "--shell", action="store_true", help="Interpret the command with the shell"
    )
    run_parser.add_argument(
        "--timeout", type=float, default=None, help="Seconds the command may take"
    )
    run_parser.add_argument("command", nargs=argparse.REMAINDER)

    pid_parser = sub.add_parser("pid", help="Check whether a process id is running")
    pid_parser.add_argument("pid")
    return parser


def _cmd_run(args: argparse.Namespace, out: OutputWriter) -> int:
    command = list(args.command)
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        out.error("run: no command given")
        return 2

    try:
        result = run(
            *command, strict=args.strict, shell=args.shell, timeout=args.timeout
        )
    except ProcessFailedError as e:
        out.error(f"command failed with exit code {e.exit_code}:")
        out.error(e.result.output)
        return 1

    for line in result.stdout:
        out.write(line)
    for line in result.stderr:
        out.error(line)
    # Children killed by a signal report -N; mirror the shell convention
    return result.exit_code if result.exit_code >= 0 else 128 - result.exit_code


def _cmd_pid(args: argparse.Namespace, out: OutputWriter) -> int:
    running = is_pid_running(args.pid)
    out.write("running" if running else "not running")
    return 0 if running else 1


def main(argv: Sequence[str] | None = None, out: OutputWriter | None = None) -> int:
    """Main entry point for the procinfra CLI."""
    args = _build_parser().parse_args(argv)
    out = out if out is not None else ConsoleOutput()

    try:
        if args.config:
            set_config(load_config(args.config))
        level = args.log_level
        if level is None:
            level = get_config().logging.level
        create_lg("procinfra", level)

        if args.cmd == "run":
            return _cmd_run(args, out)
        return _cmd_pid(args, out)
    except InfraError as e:
        out.error(f"error: {e}")
        return 1


if __name__ == "__main__":
    exit(main())
