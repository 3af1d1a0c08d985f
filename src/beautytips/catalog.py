# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Immutable catalog of merged action definitions."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .models import ActionDefinition, ActionGroup


@dataclass(frozen=True, slots=True)
class ConfigLayer:
    """Validated records contributed by one configuration source."""

    name: str
    actions: tuple[ActionDefinition, ...] = ()
    groups: tuple[ActionGroup, ...] = ()


class ActionCatalog(Mapping[str, ActionDefinition]):
    """Ordered, read-only mapping from action name to definition.

    Iteration follows first-definition order: an action redefined by a later
    layer keeps the position it had in the earliest layer that defined it.
    """

    __slots__ = ("_actions", "_groups", "_origins")

    def __init__(
        self,
        actions: Mapping[str, ActionDefinition] | None = None,
        *,
        groups: Mapping[str, ActionGroup] | None = None,
        origins: Mapping[str, str] | None = None,
    ) -> None:
        """Freeze the supplied actions, groups and origins.

        Args:
            actions: Actions keyed by name, in catalog order.
            groups: Groups keyed by name.
            origins: Layer name that last defined each action.
        """

        self._actions: Mapping[str, ActionDefinition] = MappingProxyType(dict(actions or {}))
        self._groups: Mapping[str, ActionGroup] = MappingProxyType(dict(groups or {}))
        self._origins: Mapping[str, str] = MappingProxyType(dict(origins or {}))

    @classmethod
    def from_layers(cls, layers: Iterable[ConfigLayer]) -> ActionCatalog:
        """Merge ``layers`` in ascending precedence.

        Args:
            layers: Configuration layers ordered from lowest to highest precedence.

        Returns:
            ActionCatalog: Catalog where each name maps to the record of the
            highest-precedence layer that defines it.
        """

        actions: dict[str, ActionDefinition] = {}
        groups: dict[str, ActionGroup] = {}
        origins: dict[str, str] = {}
        for layer in layers:
            for action in layer.actions:
                actions[action.name] = action
                origins[action.name] = layer.name
            for group in layer.groups:
                groups[group.name] = group
        return cls(actions, groups=groups, origins=origins)

    def __getitem__(self, name: str) -> ActionDefinition:
        return self._actions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __repr__(self) -> str:
        return f"ActionCatalog({list(self._actions)!r})"

    @property
    def groups(self) -> Mapping[str, ActionGroup]:
        """Return the merged action groups."""

        return self._groups

    def origin(self, name: str) -> str:
        """Return the name of the layer that supplied ``name``.

        Args:
            name: Action name present in the catalog.

        Returns:
            str: Layer name such as ``builtin``, ``user`` or ``repo``.
        """

        return self._origins[name]

    def definitions(self) -> tuple[ActionDefinition, ...]:
        """Return every definition in catalog order."""

        return tuple(self._actions.values())


__all__ = ["ActionCatalog", "ConfigLayer"]
