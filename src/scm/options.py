"""Parsing of ``key=value`` log options."""

from dataclasses import dataclass, field

from common.logger import get_logger

logger = get_logger(__name__)

_TRUE_VALUES = {"true", "yes", "1", "on"}


@dataclass
class LogOptions:
    """Options accepted by ``RepositoryBackend.initialize``.

    Attributes:
        exclude: Path substrings; a path containing any of them is dropped
        branch: Branch to log, overriding the detected current branch
        include_tests: Keep paths under a test source directory
        since: Reference branch for Git, skipping the selection prompt
    """

    exclude: list[str] = field(default_factory=list)
    branch: str | None = None
    include_tests: bool = False
    since: str | None = None

    @classmethod
    def parse(cls, *options: str) -> "LogOptions":
        """Build options from strings such as ``exclude=vendor/,generated``.

        Unknown keys are ignored.
        """
        parsed = cls()
        for option in options:
            key, _, value = option.partition("=")
            key = key.strip()
            value = value.strip()
            if key == "exclude":
                parsed.exclude = split_exclusions(value)
            elif key == "branch":
                parsed.branch = value or None
            elif key == "includeTests":
                parsed.include_tests = value.lower() in _TRUE_VALUES
            elif key == "since":
                parsed.since = value or None
            else:
                logger.debug(f"Ignoring unknown option '{option}'", extra={"markup": False})
        return parsed


def split_exclusions(value: str | None) -> list[str]:
    """Split a comma separated exclusion list, trimming and dropping empty entries."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
