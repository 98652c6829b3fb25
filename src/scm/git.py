"""Git backend: repository discovery from ``.git`` and the ``git log`` parser."""

import configparser
import re
import shlex
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from common.constants import GIT_DIR, GIT_LINK_SEGMENT
from common.env import env
from common.logger import get_logger

from .base import RepositoryBackend, split_author
from .diff import render_diff_html
from .errors import CommandFailure, ConfigReadFailure, NotAVcsProject
from .models import Changeset, LogResult
from .ticker import PeriodTicker

logger = get_logger(__name__)

_SECTION_RE = re.compile(r'^(remote|branch)\s+"(.+)"$')
_COMMIT_RE = re.compile(r"^commit\s+(\S+)")

# Description lines are indented by four spaces in ``git log`` output
_DESCRIPTION_INDENT = "    "


@dataclass
class Remote:
    """A configured remote."""

    name: str
    url: str

    def __str__(self) -> str:
        return f"{self.name}:{self.url}"


@dataclass
class GitConfig:
    """The parts of ``.git`` the backend needs."""

    current_branch: str
    remotes: list[Remote] = field(default_factory=list)
    branches: list[str] = field(default_factory=list)


def read_current_branch(git_dir: Path) -> str:
    """
    Read the checked out branch from ``.git/HEAD``.

    Returns:
        Branch name, or the commit hash when HEAD is detached

    Raises:
        ConfigReadFailure: If HEAD cannot be read
    """
    head = git_dir / "HEAD"
    try:
        ref = head.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise ConfigReadFailure(f"Unable to obtain current branch from {head}") from e

    if ref.startswith("ref:"):
        ref = ref[len("ref:") :].strip()
        if ref.startswith("refs/heads/"):
            return ref[len("refs/heads/") :]
        return ref.rsplit("/", 1)[-1]
    return ref


def read_git_config(git_dir: Path) -> GitConfig:
    """
    Parse remotes and branches out of ``.git/config``.

    Remotes sharing a url are listed once. The current branch is not a
    candidate reference branch.

    Raises:
        ConfigReadFailure: If the config or HEAD cannot be read
    """
    config_path = git_dir / "config"
    remotes: list[Remote] = []
    branches: list[str] = []

    if config_path.exists():
        parser = configparser.ConfigParser(strict=False, interpolation=None)
        try:
            parser.read_string(config_path.read_text(encoding="utf-8"), source=str(config_path))
        except OSError as e:
            raise ConfigReadFailure(f"Unable to read {config_path}") from e
        except configparser.Error as e:
            raise ConfigReadFailure(f"Unable to parse {config_path}: {e}") from e

        for section in parser.sections():
            match = _SECTION_RE.match(section.strip())
            if not match:
                continue
            kind, name = match.groups()
            if kind == "remote":
                url = parser.get(section, "url", fallback=None)
                if url and all(r.url != url for r in remotes):
                    remotes.append(Remote(name, url))
            else:
                branches.append(name)

    current_branch = read_current_branch(git_dir)
    branches = [b for b in branches if b != current_branch]
    return GitConfig(current_branch=current_branch, remotes=remotes, branches=branches)


class GitParseState(Enum):
    """Position of the git log parser inside a commit block."""

    HEADER = "header"
    MESSAGE = "message"
    FILES = "files"


class GitBackend(RepositoryBackend):
    """Backend for ``git log <since>..<branch> --name-only`` output."""

    link_segment = GIT_LINK_SEGMENT

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.config: GitConfig | None = None
        self.since: str | None = None
        self.log_prefix: str | None = None
        self._ticker: PeriodTicker | None = None
        self._generate_diffs = False

    def _resolve_repository(self) -> None:
        git_dir = self.working_directory / GIT_DIR
        if not git_dir.exists():
            raise NotAVcsProject("This is not a git project, code-critic will now exit.")

        self.config = read_git_config(git_dir)
        if self._branch is None:
            self._branch = self.config.current_branch

        remote = self._select_remote(self.config.remotes)
        self._set_repository(remote.url if remote else "")

        override = env.git_log_command()
        if override:
            self.log_prefix = override
            self.since = None
        else:
            self.since = self._select_since(remote)
            self.log_prefix = f"git log {self.since}.."

    def _select_remote(self, remotes: list[Remote]) -> Remote | None:
        if not remotes:
            logger.warning("No remote configured, changeset links will be relative")
            return None
        if len(remotes) == 1:
            return remotes[0]
        choice = self.chooser.choose(
            "Enter the origin (repository) to use:", [str(r) for r in remotes]
        )
        return remotes[choice]

    def _select_since(self, remote: Remote | None) -> str:
        if self.options.since:
            return self.options.since

        candidates = [b for b in self.config.branches if b != self._branch]
        if len(candidates) == 1:
            return candidates[0]
        if candidates:
            choice = self.chooser.choose("Enter the branch to base the comparison on:", candidates)
            return candidates[choice]
        if remote is not None:
            return f"{remote.name}/{self._branch}"
        raise ConfigReadFailure(
            "Unable to determine a branch to compare against, use since=<branch>"
        )

    def _log_command(self) -> list[str]:
        return shlex.split(f"{self.log_prefix}{self.branch} --name-only")

    def parse_log(self, output: str) -> LogResult:
        """
        Parse ``git log --name-only`` output.

        A commit block is a ``commit`` line, optional ``Merge:``, ``Author:``
        and ``Date:`` lines, the indented description and the changed paths.
        The first description line is the message.
        """
        result = LogResult()
        self._generate_diffs = env.generate_diffs() and not self.repository.startswith("http")
        base_link = f"{self.repository}{self.link_segment}"

        changeset: Changeset | None = None
        state = GitParseState.HEADER
        number = 0
        try:
            for line in output.splitlines():
                match = _COMMIT_RE.match(line)
                if match:
                    if changeset is not None:
                        result.changesets.append(changeset)
                    number += 1
                    changeset = Changeset.create(number, base_link, match.group(1))
                    state = GitParseState.HEADER
                    continue

                # Anything before the first commit (warnings on stderr)
                if changeset is None:
                    continue

                stripped = line.strip()
                if state is GitParseState.MESSAGE:
                    if stripped:
                        changeset.message = stripped
                        state = GitParseState.FILES
                    continue

                if state is GitParseState.FILES:
                    if stripped and not line.startswith(_DESCRIPTION_INDENT):
                        self._collect_file(stripped, changeset, result)
                    continue

                if line.startswith("Merge:"):
                    changeset.merge = True
                    self.attach(None, changeset, None)
                elif line.startswith("Author:"):
                    changeset.developer, changeset.email = split_author(line[len("Author:") :])
                elif line.startswith("Date:"):
                    changeset.date = line[len("Date:") :].strip()
                    state = GitParseState.MESSAGE

            if changeset is not None:
                result.changesets.append(changeset)
        finally:
            self._stop_ticker()

        return result

    def _collect_file(self, relative_path: str, changeset: Changeset, result: LogResult) -> None:
        if not self.accepts(relative_path):
            return
        path = str(self.working_directory / relative_path)
        self.attach(path, changeset, result.sources_for(relative_path))

    def _on_attach(self, path: str | None, changeset: Changeset) -> None:
        if not self._generate_diffs:
            return

        if self._ticker is None:
            self.send_info("Generate diff files for non-http repository")
            self._ticker = PeriodTicker()
            self._ticker.start()

        command = self._diff_command(changeset, path)
        try:
            output = self.runner(command, self.working_directory)
        except CommandFailure as e:
            # Render git's error output in place of the diff
            logger.warning(
                f"Unable to generate diff for {changeset}: {' '.join(command)}",
                extra={"markup": False},
            )
            output = e.output

        html = render_diff_html(output)
        changeset.diff = html
        if path is not None:
            changeset.file_diffs[path] = html

    def _diff_command(self, changeset: Changeset, path: str | None) -> list[str]:
        """Diff against the reference branch, or show the commit's own changes.

        ``git show`` also covers root commits, which have no parent to diff
        against.
        """
        if self.since:
            command = ["git", "diff", "--color", self.since, changeset.id]
        else:
            command = ["git", "show", "--color", "--format=", changeset.id]
        if path is not None:
            command += ["--", path]
        return command

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None
