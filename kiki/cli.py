"""Command-line entry point for the Kiki assistant."""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from importlib.metadata import PackageNotFoundError, version
from typing import Optional, Sequence, TextIO

from kiki.logger import open_file_logger
from kiki.storage import StorageError, get_config_dir, init_storage

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

_DESCRIPTION = "Kiki - Your sarcastic personal assistant"
_EPILOG = """\
Kiki is a sarcastic but helpful CLI assistant for managing tasks and notes.

Examples:
  kiki init
  kiki version"""


def _program_version() -> str:
    try:
        return version("kiki")
    except PackageNotFoundError:
        return "dev"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kiki",
        description=_DESCRIPTION,
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    commands = parser.add_subparsers(dest="command", metavar="command")
    commands.add_parser(
        "init",
        help="Initialize Kiki configuration",
        description="Creates the Kiki configuration directory and initializes required files.",
    )
    commands.add_parser("version", help="Print the Kiki version")
    return parser


def run_init(out: TextIO) -> None:
    """Create the configuration directory and data files, then report where they are."""
    config_dir = get_config_dir()
    try:
        init_storage()
    except StorageError as exc:
        raise StorageError(f"initializing storage: {exc}") from exc

    try:
        print("✅ Kiki initialized successfully!", file=out)
        print(f"📁 Config directory: {config_dir}", file=out)
        print(f"📝 Tasks file: {config_dir}/tasks.json", file=out)
        print(f"📝 Notes file: {config_dir}/notes.json", file=out)
    except OSError as exc:
        raise OSError(f"writing init output: {exc}") from exc


def _execute(
    parser: argparse.ArgumentParser,
    argv: Optional[Sequence[str]],
    logger: logging.Logger,
) -> int:
    args = parser.parse_args(argv)
    try:
        if args.command == "init":
            run_init(sys.stdout)
        elif args.command == "version":
            print(_program_version())
        else:
            parser.print_help(sys.stdout)
    except (StorageError, OSError) as exc:
        logger.error("command failed: %s", exc)
        print(exc, file=sys.stderr)
        return EXIT_FAILURE
    except Exception:
        logger.exception("panic")
        print("unexpected error", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_SUCCESS


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line and return the process exit status."""
    parser = _build_parser()
    with ExitStack() as stack:
        try:
            logger = stack.enter_context(open_file_logger())
        except OSError as exc:
            print(exc, file=sys.stderr)
            return EXIT_FAILURE
        return _execute(parser, argv, logger)


if __name__ == "__main__":
    sys.exit(main())