# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for input resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from beautytips.discovery import FilesystemWalker
from beautytips.errors import VcsError, WalkError
from beautytips.inputs import DirectorySource, FileListSource, InputResolver, VcsSource
from beautytips.models import InputKind
from beautytips.vcs import CommandOutput

from .helpers import FakeRunner


def test_directory_source(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("a\n", encoding="utf-8")
    resolver = InputResolver(walker=FilesystemWalker(runner=FakeRunner({})))

    input_set = resolver.resolve(DirectorySource(tmp_path))

    assert input_set.root == tmp_path.resolve()
    assert input_set.files == ((tmp_path / "a.txt").resolve(),)
    assert input_set.provenance.kind is InputKind.DIR


def test_file_list_source_deduplicates_and_drops_missing(tmp_path: Path) -> None:
    (tmp_path / "b.txt").write_text("b\n", encoding="utf-8")
    (tmp_path / "a.txt").write_text("a\n", encoding="utf-8")
    (tmp_path / "dir").mkdir()
    source = FileListSource(
        tmp_path,
        (Path("b.txt"), tmp_path / "a.txt", Path("./b.txt"), Path("missing.txt"), Path("dir")),
    )

    input_set = InputResolver().resolve(source)

    assert input_set.files == ((tmp_path / "a.txt").resolve(), (tmp_path / "b.txt").resolve())
    assert input_set.provenance.environment() == {"BEAUTYTIPS_INPUTS": "files"}


def test_file_list_source_requires_directory_root(tmp_path: Path) -> None:
    with pytest.raises(WalkError):
        InputResolver().resolve(FileListSource(tmp_path / "missing", (Path("a"),)))


def test_vcs_source_records_provenance(tmp_path: Path) -> None:
    (tmp_path / "a.py").write_text("a\n", encoding="utf-8")
    runner = FakeRunner(
        {
            ("git", "rev-parse"): CommandOutput(0, f"{tmp_path}\n"),
            ("git", "diff"): CommandOutput(0, "a.py\0"),
        },
    )

    input_set = InputResolver(runner=runner).resolve(VcsSource(tmp_path, vcs="git", from_rev="main"))

    assert input_set.files == ((tmp_path / "a.py").resolve(),)
    assert input_set.provenance.environment() == {
        "BEAUTYTIPS_INPUTS": "vcs",
        "BEAUTYTIPS_VCS": "git",
        "BEAUTYTIPS_VCS_FROM_REV": "main",
        "BEAUTYTIPS_VCS_TO_REV": "",
    }


def test_vcs_source_auto_detects(tmp_path: Path) -> None:
    runner = FakeRunner(
        {
            ("git", "rev-parse"): CommandOutput(0, f"{tmp_path}\n"),
            ("git", "diff"): CommandOutput(0, ""),
        },
    )

    input_set = InputResolver(runner=runner).resolve(VcsSource(tmp_path))

    assert input_set.files == ()
    assert input_set.provenance.vcs == "git"


def test_vcs_source_outside_repository_raises(tmp_path: Path) -> None:
    with pytest.raises(VcsError):
        InputResolver(runner=FakeRunner({})).resolve(VcsSource(tmp_path, vcs="jj"))
