# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Version control adapter contract shared by every backend."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..errors import SpawnError, VcsError
from ..process import run_command

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Text result of one VCS command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""


VcsRunner = Callable[[Sequence[str], Path], CommandOutput]


def default_runner(cmd: Sequence[str], cwd: Path) -> CommandOutput:
    """Execute ``cmd`` in ``cwd``; a missing binary yields exit status 127.

    Args:
        cmd: VCS command to execute.
        cwd: Working directory for the command.

    Returns:
        CommandOutput: Captured status and output.
    """

    LOGGER.debug("Running %s in %s", " ".join(cmd), cwd)
    try:
        completed = run_command(cmd, cwd=cwd)
    except SpawnError as exc:
        return CommandOutput(returncode=127, stderr=str(exc))
    return CommandOutput(returncode=completed.returncode, stdout=completed.stdout, stderr=completed.stderr)


class VcsAdapter(ABC):
    """Report the files changed in a repository between two revisions."""

    name: str

    def __init__(self, *, runner: VcsRunner | None = None) -> None:
        """Create the adapter.

        Args:
            runner: Optional command runner; defaults to :func:`default_runner`.
        """

        self._runner = runner or default_runner

    @abstractmethod
    def repository_root(self, path: Path) -> Path | None:
        """Return the repository root containing ``path``, or ``None``."""

    @abstractmethod
    def changed_paths(self, repo_root: Path, from_rev: str | None, to_rev: str | None) -> list[str]:
        """Return repository-relative paths changed between the revisions.

        Raises:
            VcsError: If the revisions cannot be resolved.
        """

    def changed_files(self, root: Path, from_rev: str | None = None, to_rev: str | None = None) -> tuple[Path, ...]:
        """Return existing files under ``root`` changed between the revisions.

        Args:
            root: Directory inside the repository.
            from_rev: Comparison base; ``None`` uses the backend default.
            to_rev: Comparison target; ``None`` means the working copy.

        Returns:
            tuple[Path, ...]: Sorted, deduplicated absolute file paths.

        Raises:
            VcsError: If ``root`` is not inside a repository of this kind or the
                revisions cannot be resolved.
        """

        repo_root = self.repository_root(root)
        if repo_root is None:
            raise VcsError(f"No repository of version control system '{self.name}' found in {root}")
        relative = self.changed_paths(repo_root, from_rev or None, to_rev or None)
        return collect_existing_files(repo_root, relative, within=root.resolve())

    def _run(self, cmd: Sequence[str], cwd: Path) -> CommandOutput:
        """Run ``cmd`` in ``cwd`` through the injected runner."""

        return self._runner(cmd, cwd)


def collect_existing_files(base: Path, entries: Iterable[str], *, within: Path) -> tuple[Path, ...]:
    """Resolve ``entries`` against ``base`` keeping regular files under ``within``.

    Args:
        base: Directory the entries are relative to.
        entries: Relative or absolute path strings.
        within: Directory every returned file must live under.

    Returns:
        tuple[Path, ...]: Sorted, deduplicated absolute file paths.
    """

    files: set[Path] = set()
    for entry in entries:
        if not entry:
            continue
        candidate = (base / entry).resolve()
        if not candidate.is_file():
            continue
        if not candidate.is_relative_to(within):
            continue
        files.add(candidate)
    return tuple(sorted(files))


__all__ = [
    "CommandOutput",
    "VcsAdapter",
    "VcsRunner",
    "collect_existing_files",
    "default_runner",
]
