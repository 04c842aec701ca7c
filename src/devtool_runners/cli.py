"""Command-line entry point.

Each operation is a subcommand; ``serve`` answers JSON-lines requests on
stdin/stdout.

Usage:
    devtool-runners tsc-check src/
    devtool-runners --format markdown run-tests auth
    devtool-runners test-file src/utils.test.ts
    devtool-runners serve < requests.jsonl

Settings come from .devtool-runners.yaml (see devtool_runners.config).
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from devtool_runners.config import RunnerSettings, load_settings
from devtool_runners.exceptions import ConfigError
from devtool_runners.formatting import ResponseFormat
from devtool_runners.protocol import ToolRequest, ToolServer

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# subcommand -> (operation, positional argument name or None)
COMMANDS: dict[str, tuple[str, str | None]] = {
    "tsc-check": ("tsc_check", "path"),
    "lint-check": ("biome_lint_check", "path"),
    "lint-fix": ("biome_lint_fix", "path"),
    "format-check": ("biome_format_check", "path"),
    "run-tests": ("bun_run_tests", "pattern"),
    "test-file": ("bun_test_file", "file"),
    "test-coverage": ("bun_test_coverage", None),
}


def configure_logging(settings: RunnerSettings, level: str | None = None) -> None:
    """Send logs to stderr (stdout carries responses) and optionally a file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.logging.file:
        handlers.append(logging.FileHandler(settings.logging.file, encoding="utf-8"))
    logging.basicConfig(
        level=(level or settings.logging.level).upper(),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="devtool-runners",
        description="Run tsc, Biome and bun test with structured, token-efficient output.",
    )
    parser.add_argument("--config", type=Path, default=None, help="Settings file (YAML)")
    parser.add_argument(
        "--format",
        choices=[f.value for f in ResponseFormat],
        default=ResponseFormat.JSON.value,
        help="Response format (default: json)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        default=None,
        help="Override the configured log level",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, (operation, argument) in COMMANDS.items():
        sub = subparsers.add_parser(name, help=f"Run {operation}")
        if argument == "file":
            sub.add_argument("file", help="Test file to run")
        elif argument is not None:
            sub.add_argument(argument, nargs="?", default=None)
    subparsers.add_parser("serve", help="Answer JSON-lines requests on stdin")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        0 on success, 1 when the response is an error, 2 on bad settings.
    """
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 2

    configure_logging(settings, args.log_level)
    server = ToolServer(settings, logger=logging.getLogger("devtool_runners"))

    if args.command == "serve":
        server.serve(sys.stdin, sys.stdout)
        return 0

    operation, argument = COMMANDS[args.command]
    arguments: dict[str, str] = {}
    if argument is not None and getattr(args, argument) is not None:
        arguments[argument] = getattr(args, argument)

    response = server.handle_request(
        ToolRequest(tool=operation, arguments=arguments, response_format=ResponseFormat(args.format))
    )
    print(response.text)
    return 1 if response.is_error else 0


if __name__ == "__main__":
    sys.exit(main())
