"""Tests for the Mercurial backend and ``hg log -v`` parsing."""

import pytest

from scm.errors import (
    ConfigReadFailure,
    InvalidLogCommand,
    NotAVcsProject,
    ParseInvariantViolation,
)
from scm.hg import HgBackend, read_hgrc_repository

HG_LOG = """\
changeset:   3:9f8e7d6c5b4a
branch:      default
tag:         tip
user:        Jane Doe <jane@example.com>
date:        Tue Mar 05 11:00:00 2024 +0100
files:       src/A.java missing.txt
description:
Fix widget parser


changeset:   2:1a2b3c4d5e6f
user:        bob
date:        Mon Mar 04 10:00:00 2024 +0100
files:       src/A.java   README.md
description:
Add widget parser
The parser reads widgets.


"""


def make_backend(checkout, runner, *options):
    backend = HgBackend(runner=runner)
    backend.initialize(checkout, *options)
    return backend


def default_branch_runner(fake_runner, log=HG_LOG):
    return fake_runner({("hg", "branch"): "default\n", ("hg", "log"): log})


class TestInitialize:
    def test_not_a_mercurial_project(self, tmp_path):
        with pytest.raises(NotAVcsProject):
            HgBackend().initialize(tmp_path)

    def test_repository_from_hgrc(self, hg_checkout):
        backend = HgBackend()
        backend.initialize(hg_checkout)
        assert backend.repository == "https://hg.example.com/widgets/"

    def test_missing_hgrc(self, hg_checkout):
        (hg_checkout / ".hg" / "hgrc").unlink()
        with pytest.raises(ConfigReadFailure, match="Unable to determine repository"):
            HgBackend().initialize(hg_checkout)

    def test_hgrc_without_paths(self, hg_checkout):
        (hg_checkout / ".hg" / "hgrc").write_text("[ui]\nusername = bob\n")
        with pytest.raises(ConfigReadFailure):
            read_hgrc_repository(hg_checkout / ".hg")

    def test_first_path_used_without_default(self, hg_checkout):
        (hg_checkout / ".hg" / "hgrc").write_text(
            "[paths]\nupstream = https://hg.example.com/upstream\n"
        )
        assert read_hgrc_repository(hg_checkout / ".hg") == "https://hg.example.com/upstream"

    def test_invalid_log_command_override(self, hg_checkout, monkeypatch):
        monkeypatch.setenv("CODE_CRITIC_HG_LOG", "hg log --template '{node}'")
        with pytest.raises(InvalidLogCommand):
            HgBackend().initialize(hg_checkout)


class TestLogCommand:
    def test_default_branch_not_passed(self, hg_checkout, fake_runner):
        runner = default_branch_runner(fake_runner)
        backend = make_backend(hg_checkout, runner)

        backend.run_log()

        assert backend.branch == "default"
        assert runner.calls_for("hg", "log") == [["hg", "log", "-v"]]

    def test_named_branch_is_passed(self, hg_checkout, fake_runner):
        runner = fake_runner({("hg", "log"): HG_LOG})
        backend = make_backend(hg_checkout, runner, "branch=stable")

        backend.run_log()

        assert runner.calls_for("hg", "branch") == []
        assert runner.calls_for("hg", "log") == [["hg", "log", "-v", "-b", "stable"]]

    def test_log_command_override(self, hg_checkout, fake_runner, monkeypatch):
        monkeypatch.setenv("CODE_CRITIC_HG_LOG", "hg log -v -l 20")
        runner = default_branch_runner(fake_runner)
        backend = make_backend(hg_checkout, runner)

        backend.run_log()

        assert runner.calls_for("hg", "log") == [["hg", "log", "-v", "-l", "20"]]


class TestParseLog:
    def test_changesets_and_files(self, hg_checkout, fake_runner):
        backend = make_backend(hg_checkout, default_branch_runner(fake_runner))

        result = backend.run_log()

        assert [c.number for c in result.changesets] == [2, 3]
        second, third = result.changesets
        assert third.id == "9f8e7d6c5b4a"
        assert third.revision == "3:9f8e7d6c5b4a"
        assert third.link == "https://hg.example.com/widgets/rev/9f8e7d6c5b4a"
        assert third.developer == "Jane Doe"
        assert third.email == "jane@example.com"
        assert third.date == "Tue Mar 05 11:00:00 2024 +0100"
        assert third.message == "Fix widget parser"
        assert second.developer == "bob"
        assert second.email is None
        assert second.message == "Add widget parser"

        assert [s.path for s in result.java_sources] == ["src/A.java"]
        assert [c.number for c in result.java_sources[0].changesets] == [2, 3]
        assert [s.path for s in result.other_sources] == ["README.md"]

    def test_missing_file_is_not_attached(self, hg_checkout, fake_runner):
        backend = make_backend(hg_checkout, default_branch_runner(fake_runner))

        result = backend.run_log()

        paths = [s.path for s in result.java_sources + result.other_sources]
        assert "missing.txt" not in paths

    def test_overlapping_blocks_are_rejected(self, hg_checkout, fake_runner):
        log = """\
changeset:   1:aaaaaaaaaaaa
user:        bob
changeset:   2:bbbbbbbbbbbb
user:        bob
"""
        backend = make_backend(hg_checkout, default_branch_runner(fake_runner, log))

        with pytest.raises(ParseInvariantViolation, match="still open"):
            backend.run_log()

    def test_malformed_changeset_line(self, hg_checkout, fake_runner):
        backend = make_backend(
            hg_checkout, default_branch_runner(fake_runner, "changeset:   abcdef\n")
        )

        with pytest.raises(ParseInvariantViolation, match="Malformed"):
            backend.run_log()

    def test_two_parents_mark_a_merge(self, hg_checkout, fake_runner):
        log = """\
changeset:   5:cccccccccccc
parent:      3:9f8e7d6c5b4a
parent:      4:dddddddddddd
user:        bob
date:        Wed Mar 06 09:00:00 2024 +0100
description:
merge stable


"""
        backend = make_backend(hg_checkout, default_branch_runner(fake_runner, log))

        result = backend.run_log()

        assert result.changesets[0].merge is True

    def test_changeset_without_description_is_kept(self, hg_checkout, fake_runner):
        log = """\
changeset:   7:eeeeeeeeeeee
user:        bob
files:       src/A.java
"""
        backend = make_backend(hg_checkout, default_branch_runner(fake_runner, log))

        result = backend.run_log()

        assert [c.number for c in result.changesets] == [7]
        assert result.java_sources[0].changesets == result.changesets

    def test_exclusion_and_test_sources(self, hg_checkout, fake_runner):
        log = """\
changeset:   1:aaaaaaaaaaaa
user:        bob
files:       vendor/lib.java src/lib.java src/test/java/ATest.java
description:
update lib
"""
        runner = default_branch_runner(fake_runner, log)

        default = make_backend(hg_checkout, runner, "exclude=vendor/").run_log()
        with_tests = make_backend(
            hg_checkout, runner, "exclude=vendor/", "includeTests=true"
        ).run_log()

        assert [s.path for s in default.java_sources] == ["src/lib.java"]
        assert [s.path for s in with_tests.java_sources] == [
            "src/lib.java",
            "src/test/java/ATest.java",
        ]

    def test_description_outside_changeset_is_reported(self, hg_checkout, fake_runner):
        log = """\
description:
orphan text
changeset:   1:aaaaaaaaaaaa
user:        bob
description:
real message
"""
        messages = []

        class Listener:
            def info(self, message):
                pass

            def debug(self, message):
                messages.append(message)

        backend = make_backend(hg_checkout, default_branch_runner(fake_runner, log))
        backend.register_progress_listener(Listener())

        result = backend.run_log()

        assert [c.message for c in result.changesets] == ["real message"]
        assert "Dropping description line 'orphan text'" in messages
        assert any(m.startswith("Ignoring description outside a changeset") for m in messages)
