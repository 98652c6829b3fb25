"""Shared fixtures for backend tests.

Repository metadata is laid out by hand and VCS commands are answered by a
fake runner, so no git or hg executable is needed.
"""

from pathlib import Path

import pytest

GIT_CONFIG = """\
[core]
\trepositoryformatversion = 0
\tfilemode = true
\tbare = false
[remote "origin"]
\turl = https://github.com/acme/widgets.git
\tfetch = +refs/heads/*:refs/remotes/origin/*
[branch "master"]
\tremote = origin
\tmerge = refs/heads/master
[branch "feature"]
\tremote = origin
\tmerge = refs/heads/feature
"""

HGRC = """\
[paths]
default = https://hg.example.com/widgets
"""

CHECKOUT_FILES = [
    "src/A.java",
    "src/lib.java",
    "vendor/lib.java",
    "README.md",
    "src/test/java/ATest.java",
]


class FakeRunner:
    """Command runner answering by command prefix.

    A response that is an exception is raised instead of returned.
    """

    def __init__(self, responses: dict[tuple[str, ...], str | Exception] | None = None):
        self.responses = responses or {}
        self.calls: list[list[str]] = []

    def __call__(self, args: list[str], cwd: Path) -> str:
        self.calls.append(list(args))
        for prefix, output in self.responses.items():
            if tuple(args[: len(prefix)]) == prefix:
                if isinstance(output, Exception):
                    raise output
                return output
        return ""

    def calls_for(self, *prefix: str) -> list[list[str]]:
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]


class StubChooser:
    """Chooser returning scripted answers and recording the requests."""

    def __init__(self, *answers: int):
        self.answers = list(answers)
        self.requests: list[tuple[str, list[str]]] = []

    def choose(self, request: str, choices: list[str]) -> int:
        self.requests.append((request, choices))
        return self.answers.pop(0)


def _write_files(root: Path, files: list[str]) -> None:
    for relative in files:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"// {relative}\n")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep operator overrides from the real environment out of the tests."""
    for name in (
        "CODE_CRITIC_GIT_LOG",
        "CODE_CRITIC_HG_LOG",
        "CODE_CRITIC_DIFFS",
        "CODE_CRITIC_COMMAND_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def git_checkout(tmp_path):
    """A working tree with a ``.git`` directory on branch ``feature``."""
    root = tmp_path / "widgets"
    git_dir = root / ".git"
    git_dir.mkdir(parents=True)
    (git_dir / "HEAD").write_text("ref: refs/heads/feature\n")
    (git_dir / "config").write_text(GIT_CONFIG)
    _write_files(root, CHECKOUT_FILES)
    return root.resolve()


@pytest.fixture
def hg_checkout(tmp_path):
    """A working tree with a ``.hg`` directory."""
    root = tmp_path / "widgets"
    hg_dir = root / ".hg"
    hg_dir.mkdir(parents=True)
    (hg_dir / "hgrc").write_text(HGRC)
    _write_files(root, CHECKOUT_FILES)
    return root.resolve()


@pytest.fixture
def fake_runner():
    return FakeRunner


@pytest.fixture
def stub_chooser():
    return StubChooser
