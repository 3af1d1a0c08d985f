# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git adapter."""

from __future__ import annotations

from pathlib import Path

from ..errors import VcsError
from .base import VcsAdapter


class GitAdapter(VcsAdapter):
    """Collect files reported as changed by ``git diff``."""

    name = "git"

    def repository_root(self, path: Path) -> Path | None:
        """Return the top level of the git work tree containing ``path``."""

        result = self._run(["git", "rev-parse", "--show-toplevel"], path)
        if result.returncode != 0:
            return None
        top = result.stdout.strip()
        return Path(top).resolve() if top else None

    def changed_paths(self, repo_root: Path, from_rev: str | None, to_rev: str | None) -> list[str]:
        """Return the paths ``git diff`` reports for the range.

        Args:
            repo_root: Top level of the work tree.
            from_rev: Comparison base; ``None`` compares the index or work tree.
            to_rev: Comparison target; ``None`` compares the work tree.

        Returns:
            list[str]: Paths relative to ``repo_root``.

        Raises:
            VcsError: If ``git diff`` exits with a non-zero status.
        """

        cmd = ["git", "diff", "--name-only", "--no-ext-diff", "-z", *self.revision_arguments(from_rev, to_rev)]
        result = self._run(cmd, repo_root)
        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            raise VcsError(f"git diff failed: {detail}")
        return [entry for entry in result.stdout.split("\0") if entry]

    @staticmethod
    def revision_arguments(from_rev: str | None, to_rev: str | None) -> list[str]:
        """Return the ``git diff`` revision arguments for a range.

        Args:
            from_rev: Comparison base, if any.
            to_rev: Comparison target, if any.

        Returns:
            list[str]: No arguments for the working copy, ``[from]`` to compare
            the working copy with a revision, ``[to~, to]`` for the changes a
            single revision introduced, or ``[from, to]``.
        """

        if from_rev and to_rev:
            return [from_rev, to_rev]
        if from_rev:
            return [from_rev]
        if to_rev:
            return [f"{to_rev}~", to_rev]
        return []


__all__ = ["GitAdapter"]
