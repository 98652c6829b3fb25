"""Repository backend interface shared by the Git and Mercurial backends.

A backend resolves repository metadata in ``initialize``, then ``run_log``
executes the VCS log command and parses its output into a ``LogResult``.
File/changeset correlation, exclusion and the test-source policy live here so
both log formats apply them identically.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from common.constants import NO_FILES_MESSAGE, TEST_SOURCE_MARKERS

from .chooser import Chooser, ConsoleChooser
from .errors import CodeCriticError
from .models import Changeset, LogResult, SourceFile
from .options import LogOptions
from .process import CommandRunner, run_command
from .progress import ProgressListener
from .reporters import source_table


def normalize_repository_url(url: str) -> str:
    """Normalize a remote url so changeset ids can be appended to it.

    GitHub urls lose their ``.git`` suffix. Every url ends with ``/``.

    Example:
        >>> normalize_repository_url("https://github.com/acme/widgets.git")
        'https://github.com/acme/widgets/'
    """
    url = url.strip()
    if not url:
        return url
    if "github.com" in url:
        url = url.rstrip("/")
        if url.endswith(".git"):
            url = url[: -len(".git")]
    if not url.endswith("/"):
        url = f"{url}/"
    return url


def split_author(text: str) -> tuple[str, str | None]:
    """Split ``Name <email>`` into its developer and email parts.

    Example:
        >>> split_author(" Jane Doe <jane@example.com>")
        ('Jane Doe', 'jane@example.com')
        >>> split_author("jane")
        ('jane', None)
    """
    text = text.strip()
    start = text.find("<")
    if start == -1:
        return text, None
    end = text.find(">", start)
    email = text[start + 1 : end] if end != -1 else text[start + 1 :]
    return text[:start].strip(), email.strip()


def is_test_source(path: str) -> bool:
    return any(marker in path for marker in TEST_SOURCE_MARKERS)


class RepositoryBackend(ABC):
    """Abstract VCS backend.

    Subclasses implement repository resolution, the log command and the log
    parser. Parsers hand each accepted file to ``attach``.
    """

    #: Path segment between the repository url and a changeset id
    link_segment: str = ""

    def __init__(self, chooser: Chooser | None = None, runner: CommandRunner | None = None):
        self.chooser = chooser or ConsoleChooser()
        self.runner = runner or run_command
        self.options = LogOptions()
        self._listeners: list[ProgressListener] = []
        self._working_directory: Path | None = None
        self._branch: str | None = None
        self._repository = ""
        self._result = LogResult()

    # -- lifecycle -------------------------------------------------------

    def initialize(self, working_directory: Path | str, *options: str) -> None:
        """Resolve repository metadata for ``working_directory``.

        Args:
            working_directory: Root of the checkout
            *options: ``key=value`` strings (exclude, branch, includeTests, since)

        Raises:
            NotAVcsProject: If the backend's metadata directory is missing
            ConfigReadFailure: If the metadata cannot be read
            InteractiveInputFailure: If a selection prompt cannot be answered
        """
        self._working_directory = Path(working_directory).resolve()
        self.options = LogOptions.parse(*options)
        self._branch = self.options.branch
        self._resolve_repository()

    def run_log(self) -> LogResult:
        """Run the log command and parse its output.

        Every call starts from an empty result, so repeated runs do not
        duplicate entries.

        Returns:
            The sorted result, also available through the accessors

        Raises:
            ParseInvariantViolation: If the log output cannot be interpreted
            CommandFailure: If the log command fails
        """
        if self._working_directory is None:
            raise CodeCriticError("initialize() must be called before run_log()")

        command = self._log_command()
        self.send_info(f"Using branch {self.branch}")
        self.send_info(f"Using repository {self.repository}")
        self.send_info(f'Using log command "{" ".join(command)}"')

        output = self.runner(command, self.working_directory)
        self.send_debug(output)

        result = self.parse_log(output)
        result.sort()
        self._result = result
        self._report(result)
        return result

    @abstractmethod
    def _resolve_repository(self) -> None:
        """Read VCS metadata and set the repository url and branch."""
        pass

    @abstractmethod
    def _log_command(self) -> list[str]:
        """Build the log command for the current branch."""
        pass

    @abstractmethod
    def parse_log(self, output: str) -> LogResult:
        """Parse raw log output into a new, unsorted result."""
        pass

    # -- accessors -------------------------------------------------------

    @property
    def working_directory(self) -> Path:
        if self._working_directory is None:
            raise CodeCriticError("Backend has not been initialized")
        return self._working_directory

    @property
    def branch(self) -> str | None:
        return self._branch

    @property
    def repository(self) -> str:
        return self._repository

    def _set_repository(self, url: str) -> None:
        self._repository = normalize_repository_url(url)

    @property
    def include_tests(self) -> bool:
        return self.options.include_tests

    @property
    def result(self) -> LogResult:
        return self._result

    @property
    def changesets(self) -> list[Changeset]:
        return self._result.changesets

    @property
    def java_sources(self) -> list[SourceFile]:
        return self._result.java_sources

    @property
    def other_sources(self) -> list[SourceFile]:
        return self._result.other_sources

    # -- progress --------------------------------------------------------

    def register_progress_listener(self, listener: ProgressListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def send_info(self, message: str) -> None:
        for listener in self._listeners:
            listener.info(message)

    def send_debug(self, message: str) -> None:
        for listener in self._listeners:
            listener.debug(message)

    # -- correlation and exclusion ---------------------------------------

    def excluded(self, path: str) -> bool:
        """True if ``path`` contains any configured exclusion substring."""
        exclude = any(x in path for x in self.options.exclude)
        if self.options.exclude:
            self.send_debug(f"exclude {path}? {exclude}")
        return exclude

    def accepts(self, relative_path: str) -> bool:
        """Check that a logged path still exists and passes the test policy."""
        if not (self.working_directory / relative_path).exists():
            self.send_debug(f"Skipping {relative_path}, no longer in the working tree")
            return False
        if not self.include_tests and is_test_source(relative_path):
            self.send_debug(f"Skipping test source {relative_path}")
            return False
        return True

    def attach(
        self,
        path: str | None,
        changeset: Changeset,
        target: list[SourceFile] | None,
    ) -> None:
        """Record that ``changeset`` touched ``path``.

        A None path stands for a file-less event such as a merge; it only
        reaches the ``_on_attach`` hook. Otherwise the changeset is appended
        to the existing entry for the path, or a new entry is added.
        """
        if path is not None and self.excluded(path):
            self.send_debug(f"Excluding {path}")
            return

        self._on_attach(path, changeset)
        if path is None or target is None:
            return

        source = next((s for s in target if s.path == path), None)
        if source is None:
            source = SourceFile(path)
            target.append(source)
        source.add_changeset(changeset)

    def _on_attach(self, path: str | None, changeset: Changeset) -> None:
        """Hook run for every accepted file and every file-less event."""
        pass

    def _report(self, result: LogResult) -> None:
        if result.is_empty:
            self.send_info(NO_FILES_MESSAGE)
            return
        self.send_info(f"Total number of files modified in this branch {result.total_files}")
        self.send_info(f"Total number of Java files: {len(result.java_sources)}")
        self.send_debug(source_table("Java sources changed", result.java_sources))
        self.send_debug(source_table("Other files changed", result.other_sources))
