"""Structured change history from Git and Mercurial logs.

Example:
    >>> from scm import create_backend
    >>>
    >>> backend = create_backend("/path/to/checkout")
    >>> backend.initialize("/path/to/checkout", "exclude=vendor/", "includeTests=false")
    >>> result = backend.run_log()
    >>> for source in result.java_sources:
    ...     print(source.path, [c.id for c in source.changesets])
"""

from .base import RepositoryBackend, normalize_repository_url
from .chooser import Chooser, ConsoleChooser, FirstChoiceChooser
from .errors import (
    CodeCriticError,
    CommandFailure,
    CommandTimeout,
    ConfigReadFailure,
    InteractiveInputFailure,
    InvalidLogCommand,
    NotAVcsProject,
    ParseInvariantViolation,
)
from .factory import BackendType, create_backend, detect_backend_type
from .git import GitBackend
from .hg import HgBackend
from .models import Changeset, LogResult, SourceFile
from .progress import LoggingProgressListener, ProgressListener

__all__ = [
    # Factory
    "BackendType",
    "create_backend",
    "detect_backend_type",
    # Backends
    "RepositoryBackend",
    "GitBackend",
    "HgBackend",
    "normalize_repository_url",
    # Models
    "Changeset",
    "SourceFile",
    "LogResult",
    # Collaborators
    "Chooser",
    "ConsoleChooser",
    "FirstChoiceChooser",
    "ProgressListener",
    "LoggingProgressListener",
    # Exceptions
    "CodeCriticError",
    "NotAVcsProject",
    "ConfigReadFailure",
    "InteractiveInputFailure",
    "ParseInvariantViolation",
    "InvalidLogCommand",
    "CommandFailure",
    "CommandTimeout",
]
