# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the git and jj change adapters."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from beautytips.errors import VcsError
from beautytips.vcs import (
    CommandOutput,
    GitAdapter,
    JjAdapter,
    adapter_for,
    changed_files,
    detect_adapter,
    known_vcs,
)

from .helpers import FakeRunner


@pytest.mark.parametrize(
    ("from_rev", "to_rev", "expected"),
    [
        (None, None, []),
        ("main", None, ["main"]),
        (None, "HEAD", ["HEAD~", "HEAD"]),
        ("v1", "v2", ["v1", "v2"]),
    ],
)
def test_git_revision_arguments(from_rev: str | None, to_rev: str | None, expected: list[str]) -> None:
    assert GitAdapter.revision_arguments(from_rev, to_rev) == expected


def test_git_changed_files_keeps_existing_files_under_root(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.py").write_text("a\n", encoding="utf-8")
    (tmp_path / "b.py").write_text("b\n", encoding="utf-8")
    runner = FakeRunner(
        {
            ("git", "rev-parse"): CommandOutput(0, f"{tmp_path}\n"),
            ("git", "diff"): CommandOutput(0, "src/a.py\0b.py\0deleted.py\0src/a.py\0"),
        },
    )

    files = GitAdapter(runner=runner).changed_files(tmp_path, None, "HEAD")

    assert files == ((tmp_path / "b.py").resolve(), (tmp_path / "src" / "a.py").resolve())
    diff_cmd = runner.calls[-1][0]
    assert diff_cmd[-2:] == ("HEAD~", "HEAD")


def test_changed_files_are_limited_to_the_requested_subdirectory(tmp_path: Path) -> None:
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "in.py").write_text("x\n", encoding="utf-8")
    (tmp_path / "out.py").write_text("x\n", encoding="utf-8")
    runner = FakeRunner(
        {
            ("git", "rev-parse"): CommandOutput(0, f"{tmp_path}\n"),
            ("git", "diff"): CommandOutput(0, "sub/in.py\0out.py\0"),
        },
    )

    files = GitAdapter(runner=runner).changed_files(tmp_path / "sub")

    assert files == ((tmp_path / "sub" / "in.py").resolve(),)


def test_git_diff_failure_raises(tmp_path: Path) -> None:
    runner = FakeRunner(
        {
            ("git", "rev-parse"): CommandOutput(0, f"{tmp_path}\n"),
            ("git", "diff"): CommandOutput(128, "", "fatal: bad revision 'nope'\n"),
        },
    )

    with pytest.raises(VcsError, match="bad revision"):
        GitAdapter(runner=runner).changed_files(tmp_path, "nope")


def test_missing_repository_raises(tmp_path: Path) -> None:
    runner = FakeRunner({("git", "rev-parse"): CommandOutput(128, "", "not a git repository")})

    with pytest.raises(VcsError, match="No repository of version control system 'git'"):
        GitAdapter(runner=runner).changed_files(tmp_path)


def test_jj_uses_interdiff_defaults_and_skips_deletions(tmp_path: Path) -> None:
    (tmp_path / "kept.rs").write_text("fn main() {}\n", encoding="utf-8")
    (tmp_path / "added.rs").write_text("\n", encoding="utf-8")
    runner = FakeRunner(
        {
            ("jj", "--color=never", "workspace"): CommandOutput(0, f"{tmp_path}\n"),
            ("jj", "--color=never", "interdiff"): CommandOutput(0, "M kept.rs\nA added.rs\nD gone.rs\n"),
        },
    )

    files = JjAdapter(runner=runner).changed_files(tmp_path)

    assert files == ((tmp_path / "added.rs").resolve(), (tmp_path / "kept.rs").resolve())
    interdiff_cmd = runner.calls[-1][0]
    assert "--from=@-" in interdiff_cmd
    assert "--to=@" in interdiff_cmd


def test_jj_honours_explicit_revisions(tmp_path: Path) -> None:
    runner = FakeRunner(
        {
            ("jj", "--color=never", "workspace"): CommandOutput(0, f"{tmp_path}\n"),
            ("jj", "--color=never", "interdiff"): CommandOutput(0, ""),
        },
    )

    assert JjAdapter(runner=runner).changed_files(tmp_path, "main", "feature") == ()
    interdiff_cmd = runner.calls[-1][0]
    assert interdiff_cmd[-2:] == ("--from=main", "--to=feature")


def test_detection_prefers_jj_then_git(tmp_path: Path) -> None:
    git_only = FakeRunner({("git", "rev-parse"): CommandOutput(0, f"{tmp_path}\n")})
    both = FakeRunner(
        {
            ("jj", "--color=never", "workspace"): CommandOutput(0, f"{tmp_path}\n"),
            ("git", "rev-parse"): CommandOutput(0, f"{tmp_path}\n"),
        },
    )

    assert known_vcs() == ("jj", "git")
    assert detect_adapter(tmp_path, runner=git_only).name == "git"
    assert detect_adapter(tmp_path, runner=both).name == "jj"


def test_detection_without_repository_raises(tmp_path: Path) -> None:
    with pytest.raises(VcsError, match="No supported version control system"):
        detect_adapter(tmp_path, runner=FakeRunner({}))


def test_unknown_vcs_is_rejected() -> None:
    with pytest.raises(VcsError, match="'svn' is not supported"):
        adapter_for("svn")


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
def test_changed_files_against_real_git_repository(tmp_path: Path) -> None:
    def git(*args: str) -> None:
        subprocess.run(["git", *args], cwd=tmp_path, check=True, capture_output=True)

    git("init", "-q")
    git("config", "user.email", "dev@example.com")
    git("config", "user.name", "Dev")
    git("config", "commit.gpgsign", "false")
    (tmp_path / "tracked.py").write_text("one\n", encoding="utf-8")
    (tmp_path / "other.py").write_text("one\n", encoding="utf-8")
    git("add", ".")
    git("commit", "-q", "-m", "initial")
    (tmp_path / "tracked.py").write_text("two\n", encoding="utf-8")

    files = changed_files(tmp_path, "git")

    assert files == ((tmp_path / "tracked.py").resolve(),)
