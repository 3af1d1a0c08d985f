# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Narrow an :class:`ActionCatalog` to the actions requested by the caller."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from .catalog import ActionCatalog
from .constants import ALL_KEYWORD, ALL_SUFFIX, NAME_SEPARATOR
from .models import ActionDefinition

LOGGER = logging.getLogger(__name__)

Matcher = Callable[[ActionDefinition], bool]


def compile_filter(pattern: str) -> Matcher:
    """Return a predicate for one selector pattern.

    Supported forms are an exact action name, ``namespace/all``,
    ``namespace/prefix_all``, a bare ``prefix_all`` matching in every
    namespace, and a bare ``all``.

    Args:
        pattern: Selector pattern supplied by the caller.

    Returns:
        Matcher: Predicate over action definitions.
    """

    namespace, separator, local = pattern.rpartition(NAME_SEPARATOR)
    if not separator:
        namespace = ""
    if local == ALL_KEYWORD:
        if separator:
            return lambda action: action.namespace == namespace
        return lambda action: True
    if local.endswith(ALL_SUFFIX):
        prefix = local[: -len(ALL_SUFFIX) + 1]
        if separator:
            return lambda action: action.namespace == namespace and action.local_name.startswith(prefix)
        return lambda action: action.local_name.startswith(prefix)
    return lambda action: action.name == pattern


def _expand_groups(catalog: ActionCatalog, filters: Iterable[str]) -> list[str]:
    """Replace group names in ``filters`` with their members, depth first.

    Args:
        catalog: Catalog holding the group definitions.
        filters: Raw selector strings.

    Returns:
        list[str]: Selectors with every group expanded. A group reached again
        through a cycle contributes nothing the second time.
    """

    patterns: list[str] = []
    pending = list(filters)
    visited: set[str] = set()
    while pending:
        entry = pending.pop(0).strip()
        if not entry:
            continue
        group = catalog.groups.get(entry)
        if group is None:
            patterns.append(entry)
            continue
        if entry in visited:
            continue
        visited.add(entry)
        pending[:0] = list(group.actions)
    return patterns


def select(catalog: ActionCatalog, filters: Sequence[str]) -> list[ActionDefinition]:
    """Return the catalog actions matching any of ``filters`` in catalog order.

    Filters that match nothing are not an error; when none match, the result
    is empty.

    Args:
        catalog: Merged action catalog.
        filters: Selector patterns or action group names.

    Returns:
        list[ActionDefinition]: Matching definitions, each listed once.
    """

    patterns = _expand_groups(catalog, filters)
    matchers = [(pattern, compile_filter(pattern)) for pattern in patterns]
    selected: list[ActionDefinition] = []
    hits: set[str] = set()
    for action in catalog.values():
        matched = [pattern for pattern, matcher in matchers if matcher(action)]
        if matched:
            selected.append(action)
            hits.update(matched)
    for pattern in patterns:
        if pattern not in hits:
            LOGGER.debug("Selector '%s' matched no actions", pattern)
    return selected


__all__ = ["Matcher", "compile_filter", "select"]
