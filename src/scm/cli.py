#!/usr/bin/env python3
"""CLI interface for the scm module."""

import argparse
from pathlib import Path

from common.env import env
from common.logger import error, get_logger, set_level, setup_logging, success

from .chooser import ConsoleChooser, FirstChoiceChooser
from .errors import CodeCriticError
from .factory import create_backend
from .progress import LoggingProgressListener
from .reporters import HistoryReporter

logger = get_logger(__name__)


def build_log_options(args) -> list[str]:
    """Translate parsed arguments to backend ``key=value`` options."""
    options = []
    if args.branch:
        options.append(f"branch={args.branch}")
    if args.since:
        options.append(f"since={args.since}")
    if args.exclude:
        options.append(f"exclude={args.exclude}")
    if args.include_tests:
        options.append("includeTests=true")
    return options


def cmd_history(args):
    """Parse the branch history and report changed files.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    working_directory = args.dir.resolve()
    if not working_directory.is_dir():
        error(f"{working_directory} is not a directory")
        return 1

    chooser = FirstChoiceChooser() if args.non_interactive else ConsoleChooser()

    try:
        backend = create_backend(working_directory, chooser=chooser)
        backend.register_progress_listener(LoggingProgressListener(logger, verbose=args.debug))
        backend.initialize(working_directory, *build_log_options(args))
        result = backend.run_log()
    except CodeCriticError as e:
        error(str(e))
        return 1

    if result.is_empty:
        # Already reported by the backend; nothing to write
        return 0

    reporter = HistoryReporter(show_sources=not args.quiet)
    if args.format == "json":
        output = reporter.report_json(result, backend.branch, backend.repository)
        if args.output:
            args.output.write_text(output, encoding="utf-8")
            success(f"History written to {args.output}")
        else:
            print(output)
    else:
        reporter.report_console(result, backend.branch, backend.repository)

    return 0


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="code-critic",
        description="Collect the changesets and files modified on a branch",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    history_parser = subparsers.add_parser(
        "history", help="Parse the VCS log of a branch into changesets and files"
    )
    history_parser.add_argument(
        "--dir",
        type=Path,
        default=Path("."),
        help="Project directory (default: current directory)",
    )
    history_parser.add_argument("--branch", help="Branch to log (default: current branch)")
    history_parser.add_argument(
        "--since", help="Git branch to compare against (default: ask when ambiguous)"
    )
    history_parser.add_argument(
        "--exclude", help="Comma separated path substrings to leave out"
    )
    history_parser.add_argument(
        "--include-tests",
        action="store_true",
        help="Keep files under src/test",
    )
    history_parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Take the first remote/branch instead of prompting",
    )
    history_parser.add_argument("--debug", action="store_true", help="Verbose output")
    history_parser.add_argument(
        "--quiet", action="store_true", help="Only print totals in console format"
    )
    history_parser.add_argument(
        "--format",
        choices=["console", "json"],
        default="console",
        help="Output format (default: console)",
    )
    history_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write JSON output to this file",
    )
    history_parser.set_defaults(func=cmd_history)

    args = parser.parse_args(argv)

    setup_logging(level=env.log_level())
    if args.debug:
        set_level("DEBUG")

    return args.func(args)


if __name__ == "__main__":
    exit(main())
