# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Input resolution: turn a source description into one :class:`InputSet`."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .discovery import FilesystemWalker
from .errors import WalkError
from .models import InputKind, InputProvenance, InputSet
from .vcs import VcsRunner, adapter_for, detect_adapter

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DirectorySource:
    """Walk every visible file under ``root``."""

    root: Path


@dataclass(frozen=True, slots=True)
class VcsSource:
    """Use the files changed between two revisions.

    ``vcs`` of ``None`` auto-detects the version control system. Empty or
    ``None`` revisions use the backend's defaults.
    """

    root: Path
    vcs: str | None = None
    from_rev: str | None = None
    to_rev: str | None = None


@dataclass(frozen=True, slots=True)
class FileListSource:
    """Use an explicit list of files, resolved relative to ``root``."""

    root: Path
    files: tuple[Path, ...] = field(default_factory=tuple)


InputSource = DirectorySource | VcsSource | FileListSource


class InputResolver:
    """Produce the working file set for a run from exactly one source."""

    def __init__(self, *, runner: VcsRunner | None = None, walker: FilesystemWalker | None = None) -> None:
        """Create the resolver.

        Args:
            runner: Optional command runner shared by the VCS adapters.
            walker: Optional filesystem walker for directory sources.
        """

        self._runner = runner
        self._walker = walker or FilesystemWalker(runner=runner)

    def resolve(self, source: InputSource) -> InputSet:
        """Return the input set described by ``source``.

        Args:
            source: Directory, VCS or explicit file list description.

        Returns:
            InputSet: Deduplicated, sorted files tagged with provenance.

        Raises:
            VcsError: If the VCS request cannot be satisfied.
            WalkError: If a directory root cannot be read.
        """

        if isinstance(source, DirectorySource):
            root = source.root.resolve()
            files = self._walker.list_files(root)
            provenance = InputProvenance(kind=InputKind.DIR)
        elif isinstance(source, VcsSource):
            root = source.root.resolve()
            adapter = (
                adapter_for(source.vcs, runner=self._runner)
                if source.vcs
                else detect_adapter(root, runner=self._runner)
            )
            files = adapter.changed_files(root, source.from_rev, source.to_rev)
            provenance = InputProvenance(
                kind=InputKind.VCS,
                vcs=adapter.name,
                from_rev=source.from_rev or None,
                to_rev=source.to_rev or None,
            )
        else:
            root = source.root.resolve()
            files = _existing_files(root, source.files)
            provenance = InputProvenance(kind=InputKind.FILES)
        LOGGER.debug("Resolved %d input file(s) from %s source at %s", len(files), provenance.kind.value, root)
        return InputSet(root=root, files=files, provenance=provenance)


def _existing_files(root: Path, entries: Sequence[Path]) -> tuple[Path, ...]:
    """Resolve ``entries`` against ``root`` keeping the regular files.

    Raises:
        WalkError: If ``root`` is not a readable directory.
    """

    if not root.is_dir():
        raise WalkError(f"Cannot read directory {root}")
    files: set[Path] = set()
    for entry in entries:
        candidate = (entry if entry.is_absolute() else root / entry).resolve()
        if candidate.is_file():
            files.add(candidate)
        else:
            LOGGER.debug("Ignoring %s: not a regular file", entry)
    return tuple(sorted(files))


def resolve_inputs(source: InputSource, *, runner: VcsRunner | None = None) -> InputSet:
    """Return the input set for ``source`` using a default resolver."""

    return InputResolver(runner=runner).resolve(source)


__all__ = [
    "DirectorySource",
    "FileListSource",
    "InputResolver",
    "InputSource",
    "VcsSource",
    "resolve_inputs",
]
