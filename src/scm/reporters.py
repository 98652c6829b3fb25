"""Summaries of a parsed history."""

import json

from rich.markup import escape

from common.logger import get_logger

from .models import Changeset, LogResult, SourceFile

logger = get_logger(__name__)


def source_table(header: str, sources: list[SourceFile]) -> str:
    """Format sources as an aligned table of path and changeset links.

    Example:
        >>> print(source_table("Java sources changed", sources))
        Java sources changed
        -------------------------
        /repo/src/A.java https://github.com/acme/widgets/commit/1a2b, ...
    """
    width = max((len(s.path) for s in sources), default=0)
    lines = [header, "-" * 25]
    for source in sources:
        links = ", ".join(c.link for c in source.changesets)
        lines.append(f"{source.path:<{width}} {links}")
    return "\n".join(lines) + "\n"


def changeset_to_dict(changeset: Changeset) -> dict:
    return {
        "number": changeset.number,
        "id": changeset.id,
        "link": changeset.link,
        "developer": changeset.developer,
        "email": changeset.email,
        "date": changeset.date,
        "message": changeset.message,
        "merge": changeset.merge,
        "diff": changeset.diff,
    }


def source_to_dict(source: SourceFile) -> dict:
    return {
        "path": source.path,
        "changesets": [c.number for c in source.changesets],
    }


class HistoryReporter:
    """Format and display a parsed history."""

    def __init__(self, show_sources: bool = True):
        """Initialize the reporter.

        Args:
            show_sources: Whether to list every source file on the console
        """
        self.show_sources = show_sources

    def report_console(self, result: LogResult, branch: str | None, repository: str) -> None:
        """Print a summary of the history to the console."""
        logger.info(f"Branch: [bold]{escape(str(branch))}[/bold]")
        logger.info(f"Repository: {escape(repository) or '(none)'}")
        logger.info(
            f"Changesets: [bold]{len(result.changesets)}[/bold], "
            f"Java files: [bold]{len(result.java_sources)}[/bold], "
            f"other files: [bold]{len(result.other_sources)}[/bold]"
        )

        if not self.show_sources:
            return

        for header, sources in (
            ("Java sources changed", result.java_sources),
            ("Other files changed", result.other_sources),
        ):
            if not sources:
                continue
            logger.info("")
            logger.info(f"[bold]{header}[/bold]")
            for source in sources:
                numbers = ", ".join(str(c.number) for c in source.changesets)
                logger.info(f"  {escape(source.path)}  [dim]({numbers})[/dim]")

    def report_json(self, result: LogResult, branch: str | None, repository: str) -> str:
        """Format the history as JSON.

        Returns:
            JSON string with branch, repository, changesets and both source lists
        """
        data = {
            "branch": branch,
            "repository": repository,
            "changesets": [changeset_to_dict(c) for c in result.changesets],
            "java_sources": [source_to_dict(s) for s in result.java_sources],
            "other_sources": [source_to_dict(s) for s in result.other_sources],
        }
        return json.dumps(data, indent=2)
