# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Jujutsu adapter."""

from __future__ import annotations

from pathlib import Path
from typing import Final

from ..errors import VcsError
from .base import VcsAdapter

DEFAULT_FROM_REV: Final[str] = "@-"
DEFAULT_TO_REV: Final[str] = "@"
_DELETED_PREFIX: Final[str] = "D "
_STATUS_WIDTH: Final[int] = 2


class JjAdapter(VcsAdapter):
    """Collect files reported as changed by ``jj interdiff --summary``."""

    name = "jj"

    def repository_root(self, path: Path) -> Path | None:
        """Return the root of the jj workspace containing ``path``."""

        result = self._run(["jj", "--color=never", "workspace", "root"], path)
        if result.returncode != 0:
            return None
        top = result.stdout.strip()
        return Path(top).resolve() if top else None

    def changed_paths(self, repo_root: Path, from_rev: str | None, to_rev: str | None) -> list[str]:
        """Return the paths ``jj interdiff`` reports between the two revisions.

        Raises:
            VcsError: If ``jj interdiff`` exits with a non-zero status.
        """

        cmd = [
            "jj",
            "--color=never",
            "interdiff",
            "-s",
            f"--from={from_rev or DEFAULT_FROM_REV}",
            f"--to={to_rev or DEFAULT_TO_REV}",
        ]
        result = self._run(cmd, repo_root)
        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            raise VcsError(f"jj interdiff failed: {detail}")
        paths: list[str] = []
        for line in result.stdout.splitlines():
            if not line or line.startswith(_DELETED_PREFIX):
                continue
            paths.append(line[_STATUS_WIDTH:])
        return paths


__all__ = ["JjAdapter"]
