# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Named template values other than the file list."""

from __future__ import annotations

import logging
import threading
import tomllib
from collections.abc import Callable, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Final

from .errors import TemplateError
from .models import ActionInvocation, ContextValue

LOGGER = logging.getLogger(__name__)

CARGO_MANIFEST: Final[str] = "Cargo.toml"

ContextProvider = Callable[[ActionInvocation], ContextValue]


@lru_cache(maxsize=256)
def _cargo_package_name(manifest: Path) -> str | None:
    try:
        with manifest.open("rb") as handle:
            document = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        LOGGER.debug("Skipping unreadable manifest %s: %s", manifest, exc)
        return None
    package = document.get("package")
    if isinstance(package, Mapping):
        name = package.get("name")
        if isinstance(name, str) and name:
            return name
    return None


def cargo_targets(invocation: ActionInvocation) -> tuple[str, ...]:
    """Return the cargo packages owning the invocation's files.

    For each file the nearest ``Cargo.toml`` declaring ``[package].name`` is
    located by walking up towards the input root.

    Args:
        invocation: Invocation whose files are mapped to packages.

    Returns:
        tuple[str, ...]: Sorted, deduplicated package names.
    """

    root = invocation.input_set.root
    names: set[str] = set()
    for path in invocation.files:
        for directory in (path.parent, *path.parent.parents):
            if not directory.is_relative_to(root):
                break
            manifest = directory / CARGO_MANIFEST
            if manifest.is_file() and (name := _cargo_package_name(manifest)):
                names.add(name)
                break
    return tuple(sorted(names))


DEFAULT_PROVIDERS: Final[Mapping[str, ContextProvider]] = {"cargo_targets": cargo_targets}


class TemplateContext:
    """Resolve context markers from caller values, then lazy providers.

    Provider results are cached per action for the lifetime of the context,
    which is one run.
    """

    def __init__(
        self,
        values: Mapping[str, ContextValue] | None = None,
        *,
        providers: Mapping[str, ContextProvider] | None = None,
    ) -> None:
        """Create a context for one run.

        Args:
            values: Fixed marker values supplied by the caller.
            providers: Computed values keyed by marker name; defaults to
                :data:`DEFAULT_PROVIDERS`.
        """

        self._values = dict(values or {})
        self._providers = dict(DEFAULT_PROVIDERS if providers is None else providers)
        self._cache: dict[tuple[str, str], ContextValue] = {}
        self._lock = threading.Lock()

    def lookup(self, name: str, invocation: ActionInvocation) -> ContextValue | None:
        """Return the value of ``name`` for ``invocation``.

        Args:
            name: Marker name taken from the command template.
            invocation: Invocation the value is computed for.

        Returns:
            ContextValue | None: The caller value or provider result, or
            ``None`` when nothing supplies ``name``.

        Raises:
            TemplateError: If the provider for ``name`` fails.
        """

        if name in self._values:
            return self._values[name]
        provider = self._providers.get(name)
        if provider is None:
            return None
        key = (name, invocation.name)
        with self._lock:
            if key in self._cache:
                return self._cache[key]
        try:
            value = provider(invocation)
        except Exception as exc:
            LOGGER.debug("Context provider %r failed for %s", name, invocation.name, exc_info=True)
            raise TemplateError(invocation.name, f"{{{{{name}}}}}", reason=f"context provider failed: {exc}") from exc
        with self._lock:
            self._cache.setdefault(key, value)
        return value


__all__ = ["ContextProvider", "DEFAULT_PROVIDERS", "TemplateContext", "cargo_targets"]
