# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Version control adapters and lookup helpers."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from ..errors import VcsError
from .base import CommandOutput, VcsAdapter, VcsRunner, collect_existing_files, default_runner
from .git import GitAdapter
from .jj import JjAdapter

AdapterFactory = Callable[..., VcsAdapter]

# Detection order: a jj workspace colocated with git reports through jj.
KNOWN_ADAPTERS: dict[str, AdapterFactory] = {
    JjAdapter.name: JjAdapter,
    GitAdapter.name: GitAdapter,
}


def known_vcs() -> tuple[str, ...]:
    """Return the names of the supported version control systems."""

    return tuple(KNOWN_ADAPTERS)


def adapter_for(name: str, *, runner: VcsRunner | None = None) -> VcsAdapter:
    """Return the adapter registered under ``name``.

    Raises:
        VcsError: If ``name`` is not a supported system.
    """

    factory = KNOWN_ADAPTERS.get(name)
    if factory is None:
        raise VcsError(f"Version control system '{name}' is not supported")
    return factory(runner=runner)


def detect_adapter(root: Path, *, runner: VcsRunner | None = None) -> VcsAdapter:
    """Return the first adapter that recognises ``root`` as a repository.

    Raises:
        VcsError: If no known system manages ``root``.
    """

    for name in KNOWN_ADAPTERS:
        adapter = adapter_for(name, runner=runner)
        if adapter.repository_root(root) is not None:
            return adapter
    raise VcsError(f"No supported version control system found in {root}")


def changed_files(
    root: Path,
    vcs_kind: str | None,
    from_rev: str | None = None,
    to_rev: str | None = None,
    *,
    runner: VcsRunner | None = None,
) -> tuple[Path, ...]:
    """Return files changed between two revisions of the repository at ``root``.

    Args:
        root: Directory inside the repository.
        vcs_kind: Adapter name, or ``None`` to auto-detect.
        from_rev: Comparison base; empty means the backend default.
        to_rev: Comparison target; empty means the working copy.
        runner: Optional command runner shared by the adapters.

    Returns:
        tuple[Path, ...]: Sorted absolute paths of changed files.

    Raises:
        VcsError: If the system is unsupported, absent, or the revisions do
            not resolve.
    """

    adapter = adapter_for(vcs_kind, runner=runner) if vcs_kind else detect_adapter(root, runner=runner)
    return adapter.changed_files(root, from_rev, to_rev)


__all__ = [
    "CommandOutput",
    "GitAdapter",
    "JjAdapter",
    "KNOWN_ADAPTERS",
    "VcsAdapter",
    "VcsRunner",
    "adapter_for",
    "changed_files",
    "collect_existing_files",
    "default_runner",
    "detect_adapter",
    "known_vcs",
]
