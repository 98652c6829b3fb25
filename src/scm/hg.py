"""Mercurial backend: repository discovery from ``.hg`` and the ``hg log -v`` parser."""

import configparser
import shlex
from pathlib import Path

from common.constants import HG_DEFAULT_BRANCH, HG_DIR, HG_LINK_SEGMENT
from common.env import env

from .base import RepositoryBackend, split_author
from .errors import ConfigReadFailure, InvalidLogCommand, NotAVcsProject, ParseInvariantViolation
from .models import Changeset, LogResult

DEFAULT_LOG_COMMAND = "hg log -v"


def read_hgrc_repository(hg_dir: Path) -> str:
    """
    Read the repository url from the ``[paths]`` section of ``.hg/hgrc``.

    The ``default`` path wins; otherwise the first path is used.

    Raises:
        ConfigReadFailure: If hgrc is missing, unreadable or has no path
    """
    hgrc = hg_dir / "hgrc"
    if not hgrc.exists():
        raise ConfigReadFailure(f"Unable to determine repository, {hgrc} does not exist")

    parser = configparser.ConfigParser(strict=False, interpolation=None)
    try:
        parser.read_string(hgrc.read_text(encoding="utf-8"), source=str(hgrc))
    except OSError as e:
        raise ConfigReadFailure(f"Unable to read {hgrc}") from e
    except configparser.Error as e:
        raise ConfigReadFailure(f"Unable to parse {hgrc}: {e}") from e

    if parser.has_section("paths"):
        paths = parser["paths"]
        repository = paths.get("default") or next(iter(paths.values()), None)
        if repository:
            return repository.strip()
    raise ConfigReadFailure(f"Unable to determine repository from {hgrc}")


def validate_log_command(command: str) -> str:
    """Reject operator log commands whose output the parser cannot read."""
    if not command.startswith("hg") or "log" not in command or "-v" not in command:
        raise InvalidLogCommand(
            'The provided hg command must start with hg log and run verbosely (use "-v")'
        )
    return command


class HgBackend(RepositoryBackend):
    """Backend for ``hg log -v`` output."""

    link_segment = HG_LINK_SEGMENT

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.log_command = DEFAULT_LOG_COMMAND

    def _resolve_repository(self) -> None:
        hg_dir = self.working_directory / HG_DIR
        if not hg_dir.exists():
            raise NotAVcsProject("This is not a mercurial project, code-critic will now exit.")

        override = env.hg_log_command()
        self.log_command = validate_log_command(override) if override else DEFAULT_LOG_COMMAND

        repository = read_hgrc_repository(hg_dir)
        self.send_debug(f"Using repository path {repository}")
        self._set_repository(repository)

    def _log_command(self) -> list[str]:
        if self._branch is None:
            self._branch = self.runner(["hg", "branch"], self.working_directory).strip()

        command = shlex.split(self.log_command)
        if self._branch != HG_DEFAULT_BRANCH:
            command += ["-b", self._branch]
        return command

    def parse_log(self, output: str) -> LogResult:
        """
        Parse ``hg log -v`` output.

        A block opens on ``changeset:`` and closes on the line after
        ``description:``, which is the message.

        Raises:
            ParseInvariantViolation: If a block opens while another is open
        """
        result = LogResult()
        base_link = f"{self.repository}{self.link_segment}"

        changeset: Changeset | None = None
        parents = 0
        await_message = False

        for line in output.splitlines():
            if not line.strip():
                continue

            if await_message:
                await_message = False
                if changeset is None:
                    self.send_debug(f"Dropping description line '{line.strip()}'")
                else:
                    changeset.message = line.strip()
                    result.changesets.append(changeset)
                changeset = None
                continue

            if line.startswith("changeset:"):
                if changeset is not None:
                    raise ParseInvariantViolation(
                        f"Changeset {changeset} is still open at '{line.strip()}'"
                    )
                changeset = self._open_changeset(line[len("changeset:") :], base_link)
                parents = 0
            elif line.startswith("description:"):
                if changeset is None:
                    self.send_debug(f"Ignoring description outside a changeset: '{line.strip()}'")
                await_message = True
            elif changeset is None:
                continue
            elif line.startswith("parent:"):
                parents += 1
                if parents > 1:
                    changeset.merge = True
            elif line.startswith("user:"):
                changeset.developer, changeset.email = split_author(line[len("user:") :])
            elif line.startswith("date:"):
                changeset.date = line[len("date:") :].strip()
            elif line.startswith("files:"):
                for name in line[len("files:") :].split():
                    if self.accepts(name):
                        self.attach(name, changeset, result.sources_for(name))

        if changeset is not None:
            # No description; keep it so its files stay associated
            self.send_debug(f"Changeset {changeset} has no description")
            result.changesets.append(changeset)

        return result

    @staticmethod
    def _open_changeset(text: str, base_link: str) -> Changeset:
        number, sep, node = text.strip().partition(":")
        try:
            if not sep or not node:
                raise ValueError(text)
            return Changeset.create(int(number), base_link, node.strip())
        except ValueError as e:
            raise ParseInvariantViolation(f"Malformed changeset line '{text.strip()}'") from e
