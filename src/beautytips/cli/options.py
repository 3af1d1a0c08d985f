# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared option declarations and normalisation for CLI commands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..constants import USAGE_EXIT_CODE
from ..inputs import DirectorySource, FileListSource, InputSource, VcsSource
from .shared import CLIError

ROOT_OPTION = Annotated[
    Path | None,
    typer.Option("--root", "-r", help="Project root for VCS and file-list inputs (default: current directory)."),
]
FROM_DIR_OPTION = Annotated[
    Path | None,
    typer.Option("--from-dir", help="Use every visible file under this directory."),
]
FROM_VCS_OPTION = Annotated[
    bool,
    typer.Option("--from-vcs", help="Use the files changed in version control."),
]
VCS_OPTION = Annotated[
    str | None,
    typer.Option("--vcs", help="Version control system to query (default: auto-detect)."),
]
FROM_REV_OPTION = Annotated[
    str | None,
    typer.Option("--from-rev", help="Revision to compare from (requires --from-vcs)."),
]
TO_REV_OPTION = Annotated[
    str | None,
    typer.Option("--to-rev", help="Revision to compare to (requires --from-vcs)."),
]
FROM_FILES_OPTION = Annotated[
    list[Path] | None,
    typer.Option("--from-files", help="Use this file (repeatable)."),
]
ACTIONS_OPTION = Annotated[
    list[str] | None,
    typer.Option("--actions", "-a", help="Action name, namespace/prefix_all, group or 'all' (repeatable)."),
]
USER_CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option("--config", help="User configuration file to use instead of the default location."),
]
REPO_CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option("--repo-config", help="Repository configuration file to use instead of <root>/.beautytips.toml."),
]
JOBS_OPTION = Annotated[
    int | None,
    typer.Option("--jobs", "-j", min=1, help="Maximum number of concurrent actions."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Write engine debug logs to stderr."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
NO_COLOR_OPTION = Annotated[
    bool,
    typer.Option("--no-color", help="Disable colour output."),
]


def normalize_cli_values(values: Sequence[str] | None) -> tuple[str, ...]:
    """Return stripped CLI values, splitting comma-separated entries."""

    if not values:
        return ()
    cleaned: list[str] = []
    for entry in values:
        for part in entry.split(","):
            stripped = part.strip()
            if stripped:
                cleaned.append(stripped)
    return tuple(cleaned)


@dataclass(slots=True)
class InputOptions:
    """Raw input-selection flags supplied to a command."""

    root: Path | None = None
    from_dir: Path | None = None
    from_vcs: bool = False
    vcs: str | None = None
    from_rev: str | None = None
    to_rev: str | None = None
    from_files: Sequence[Path] | None = None

    @property
    def project_root(self) -> Path:
        """Return the directory used for repository configuration lookup."""

        if self.from_dir is not None and not self.from_vcs and not self.from_files:
            return self.from_dir.resolve()
        return (self.root or Path.cwd()).resolve()

    def to_source(self) -> InputSource:
        """Return the single input source described by the flags.

        Raises:
            CLIError: If more than one input mode is requested or revisions are
                given without ``--from-vcs``.
        """

        modes = [
            flag
            for flag, active in (
                ("--from-dir", self.from_dir is not None),
                ("--from-vcs", self.from_vcs),
                ("--from-files", bool(self.from_files)),
            )
            if active
        ]
        if len(modes) > 1:
            raise CLIError(f"{' and '.join(modes)} are mutually exclusive", exit_code=USAGE_EXIT_CODE)
        if not self.from_vcs and (self.vcs or self.from_rev or self.to_rev):
            raise CLIError("--vcs, --from-rev and --to-rev require --from-vcs", exit_code=USAGE_EXIT_CODE)
        root = self.project_root
        if self.from_vcs:
            return VcsSource(root=root, vcs=self.vcs, from_rev=self.from_rev, to_rev=self.to_rev)
        if self.from_files:
            return FileListSource(root=root, files=tuple(self.from_files))
        return DirectorySource(root=root)


__all__ = [
    "ACTIONS_OPTION",
    "NO_COLOR_OPTION",
    "DEBUG_OPTION",
    "EMOJI_OPTION",
    "FROM_DIR_OPTION",
    "FROM_FILES_OPTION",
    "FROM_REV_OPTION",
    "FROM_VCS_OPTION",
    "InputOptions",
    "JOBS_OPTION",
    "REPO_CONFIG_OPTION",
    "ROOT_OPTION",
    "TO_REV_OPTION",
    "USER_CONFIG_OPTION",
    "VCS_OPTION",
    "normalize_cli_values",
]
