"""Backend factory.

Selects the Git or Mercurial backend by probing the working directory for a
VCS metadata directory.
"""

from enum import Enum
from pathlib import Path

from common.constants import GIT_DIR, HG_DIR

from .base import RepositoryBackend
from .chooser import Chooser
from .errors import NotAVcsProject
from .git import GitBackend
from .hg import HgBackend
from .process import CommandRunner


class BackendType(str, Enum):
    """Supported version control systems."""

    GIT = "git"
    HG = "hg"


_BACKENDS: dict[BackendType, type[RepositoryBackend]] = {
    BackendType.GIT: GitBackend,
    BackendType.HG: HgBackend,
}


def detect_backend_type(working_directory: Path | str) -> BackendType:
    """Find which VCS manages ``working_directory``.

    Raises:
        NotAVcsProject: If neither ``.git`` nor ``.hg`` is present
    """
    working_directory = Path(working_directory)
    if (working_directory / GIT_DIR).exists():
        return BackendType.GIT
    if (working_directory / HG_DIR).exists():
        return BackendType.HG
    raise NotAVcsProject(
        f"{working_directory} is not a git or mercurial project, code-critic will now exit."
    )


def create_backend(
    working_directory: Path | str,
    chooser: Chooser | None = None,
    runner: CommandRunner | None = None,
) -> RepositoryBackend:
    """Create the backend for the VCS managing ``working_directory``.

    The backend still has to be initialized.

    Example:
        >>> backend = create_backend(Path("."))
        >>> backend.initialize(Path("."), "exclude=generated/")
        >>> result = backend.run_log()
    """
    backend_type = detect_backend_type(working_directory)
    return _BACKENDS[backend_type](chooser=chooser, runner=runner)
