"""Tests for backend selection."""

import pytest

from scm.errors import NotAVcsProject
from scm.factory import BackendType, create_backend, detect_backend_type
from scm.git import GitBackend
from scm.hg import HgBackend


class TestDetectBackendType:
    def test_git(self, git_checkout):
        assert detect_backend_type(git_checkout) == BackendType.GIT

    def test_hg(self, hg_checkout):
        assert detect_backend_type(str(hg_checkout)) == BackendType.HG

    def test_git_preferred_over_hg(self, git_checkout):
        (git_checkout / ".hg").mkdir()
        assert detect_backend_type(git_checkout) == BackendType.GIT

    def test_neither(self, tmp_path):
        with pytest.raises(NotAVcsProject):
            detect_backend_type(tmp_path)

    def test_enum_values(self):
        assert BackendType("git") is BackendType.GIT
        assert BackendType.HG == "hg"


class TestCreateBackend:
    def test_git_backend_with_collaborators(self, git_checkout, fake_runner, stub_chooser):
        runner, chooser = fake_runner(), stub_chooser()

        backend = create_backend(git_checkout, chooser=chooser, runner=runner)

        assert isinstance(backend, GitBackend)
        assert backend.runner is runner
        assert backend.chooser is chooser

    def test_hg_backend(self, hg_checkout):
        assert isinstance(create_backend(hg_checkout), HgBackend)
