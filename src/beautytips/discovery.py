# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem walker producing every visible file below a root."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from .constants import ALWAYS_EXCLUDE_DIRS
from .errors import WalkError
from .vcs.base import VcsRunner, collect_existing_files, default_runner

LOGGER = logging.getLogger(__name__)

_GIT_LIST_FILES = ("git", "ls-files", "--cached", "--others", "--exclude-standard", "-z")


class FilesystemWalker:
    """Traverse a directory tree collecting non-ignored regular files.

    Hidden entries and VCS metadata directories are always skipped. Inside a
    git work tree the ignore rules are taken from ``git ls-files`` so that
    ``.gitignore`` and ``info/exclude`` are honoured; elsewhere a plain walk
    is used.
    """

    def __init__(self, *, runner: VcsRunner | None = None, respect_gitignore: bool = True) -> None:
        """Create the walker.

        Args:
            runner: Optional command runner used for ``git ls-files``.
            respect_gitignore: When ``False`` always use a plain directory walk.
        """

        self._runner = runner or default_runner
        self.respect_gitignore = respect_gitignore

    def list_files(self, root: Path) -> tuple[Path, ...]:
        """Return the sorted absolute paths of all visible files under ``root``.

        Args:
            root: Directory to walk.

        Returns:
            tuple[Path, ...]: Deduplicated, sorted file paths.

        Raises:
            WalkError: If ``root`` is not a readable directory.
        """

        resolved = root.resolve()
        try:
            with os.scandir(resolved):
                pass
        except OSError as exc:
            raise WalkError(f"Cannot read directory {root}: {exc.strerror or exc}") from exc

        if self.respect_gitignore:
            listed = self._git_listed(resolved)
            if listed is not None:
                return tuple(path for path in listed if is_visible(path, resolved))
        return tuple(sorted(set(self._walk(resolved))))

    def _git_listed(self, root: Path) -> tuple[Path, ...] | None:
        """Return files ``git ls-files`` reports under ``root``, or ``None`` outside git."""

        result = self._runner(_GIT_LIST_FILES, root)
        if result.returncode != 0:
            LOGGER.debug("git ls-files unavailable in %s; walking the filesystem", root)
            return None
        return collect_existing_files(root, result.stdout.split("\0"), within=root)

    @staticmethod
    def _walk(root: Path) -> Iterator[Path]:
        """Yield visible regular files below ``root``, skipping hidden and excluded names."""

        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(name for name in dirnames if not _is_skipped_name(name))
            current = Path(dirpath)
            for filename in filenames:
                if _is_skipped_name(filename):
                    continue
                candidate = current / filename
                if candidate.is_file():
                    yield candidate.resolve()


def _is_skipped_name(name: str) -> bool:
    return name.startswith(".") or name in ALWAYS_EXCLUDE_DIRS


def is_visible(path: Path, root: Path) -> bool:
    """Return ``True`` when no component of ``path`` below ``root`` is hidden or excluded."""

    try:
        parts: Iterable[str] = path.relative_to(root).parts
    except ValueError:
        return False
    return not any(_is_skipped_name(part) for part in parts)


def list_files(root: Path) -> tuple[Path, ...]:
    """Return all visible files under ``root`` using the default walker."""

    return FilesystemWalker().list_files(root)


__all__ = ["FilesystemWalker", "is_visible", "list_files"]
