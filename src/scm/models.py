"""Data models for parsed VCS history."""

from dataclasses import dataclass, field

from common.constants import JAVA_SUFFIX


@dataclass
class Changeset:
    """One commit or revision and its metadata.

    ``number`` orders changesets: the parse order for Git, the native
    revision number for Mercurial.
    """

    number: int
    id: str
    link: str
    developer: str | None = None
    email: str | None = None
    date: str | None = None
    message: str = ""
    merge: bool = False
    diff: str | None = None
    file_diffs: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def create(cls, number: int, base_link: str, changeset_id: str) -> "Changeset":
        """Create a changeset whose link is ``base_link`` followed by its id."""
        return cls(number=number, id=changeset_id, link=f"{base_link}{changeset_id}")

    @property
    def revision(self) -> str:
        return f"{self.number}:{self.id}"

    def __str__(self) -> str:
        return self.revision


@dataclass(eq=False)
class SourceFile:
    """A file path and the changesets that touched it.

    Two source files with the same path are the same entity.
    """

    path: str
    changesets: list[Changeset] = field(default_factory=list)

    def __post_init__(self):
        if not self.path:
            raise ValueError("path cannot be empty")

    def add_changeset(self, changeset: Changeset) -> None:
        if not any(c is changeset for c in self.changesets):
            self.changesets.append(changeset)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceFile):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __lt__(self, other: "SourceFile") -> bool:
        return self.path < other.path

    def __str__(self) -> str:
        return self.path


@dataclass
class LogResult:
    """Everything collected by a single log run."""

    changesets: list[Changeset] = field(default_factory=list)
    java_sources: list[SourceFile] = field(default_factory=list)
    other_sources: list[SourceFile] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no Java source was found."""
        return not self.java_sources

    @property
    def total_files(self) -> int:
        return len(self.java_sources) + len(self.other_sources)

    def sources_for(self, path: str) -> list[SourceFile]:
        """The list a path belongs to, decided by its ``.java`` suffix."""
        return self.java_sources if path.endswith(JAVA_SUFFIX) else self.other_sources

    def sort(self) -> None:
        """Order changesets by number and sources by path."""
        self.changesets.sort(key=lambda c: c.number)
        for sources in (self.java_sources, self.other_sources):
            sources.sort(key=lambda s: s.path)
            for source in sources:
                source.changesets.sort(key=lambda c: c.number)
