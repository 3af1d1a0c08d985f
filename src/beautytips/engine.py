# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Caller-facing engine operations.

The engine composes the stages of a run: load the catalog, resolve the input
set, select and filter actions, then schedule them and aggregate the results.
Configuration and input errors propagate; execution errors are reported in
the returned :class:`RunSummary`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from .catalog import ActionCatalog
from .config import ActionConfigStore
from .constants import ALL_KEYWORD
from .context import TemplateContext
from .execution import ExecutionOptions, PlannedInvocation, Scheduler
from .filtering import plan_invocations
from .inputs import InputResolver, InputSource
from .models import ActionDefinition, ContextValue, InputSet
from .results import RunSummary
from .selection import select

LOGGER = logging.getLogger(__name__)

DEFAULT_FILTERS: tuple[str, ...] = (ALL_KEYWORD,)


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """Catalog listing row."""

    name: str
    origin: str
    definition: ActionDefinition

    @property
    def description(self) -> str:
        """Return the action's description, empty when none is configured."""

        return self.definition.description


def list_catalog(catalog: ActionCatalog, filters: Sequence[str] | None = None) -> list[CatalogEntry]:
    """Return catalog entries in catalog order, optionally narrowed by ``filters``."""

    actions = select(catalog, filters) if filters else catalog.definitions()
    return [CatalogEntry(name=action.name, origin=catalog.origin(action.name), definition=action) for action in actions]


def plan(catalog: ActionCatalog, filters: Sequence[str], input_set: InputSet) -> list[PlannedInvocation]:
    """Select actions and filter the input set for each of them."""

    selected = select(catalog, filters)
    LOGGER.debug("Selected %d action(s) for filters %s", len(selected), list(filters))
    return plan_invocations(selected, input_set)


def run_actions(
    catalog: ActionCatalog,
    filters: Sequence[str],
    input_set: InputSet,
    *,
    options: ExecutionOptions | None = None,
    context: Mapping[str, ContextValue] | None = None,
    scheduler: Scheduler | None = None,
) -> RunSummary:
    """Run the actions selected by ``filters`` over ``input_set``.

    Args:
        catalog: Merged action catalog.
        filters: Selector patterns.
        input_set: Resolved working file set.
        options: Execution tunables used when no scheduler is supplied.
        context: Named template values overriding computed ones.
        scheduler: Optional pre-built scheduler, for callers that need to
            cancel the run from another thread.

    Returns:
        RunSummary: Aggregated results in selection order.
    """

    planned = plan(catalog, filters, input_set)
    active = scheduler or Scheduler(options=options, context=TemplateContext(context))
    return active.run(planned)


class Engine:
    """Bundle a config store and input resolver behind the three engine operations."""

    def __init__(
        self,
        store: ActionConfigStore,
        *,
        resolver: InputResolver | None = None,
        options: ExecutionOptions | None = None,
        context: Mapping[str, ContextValue] | None = None,
    ) -> None:
        """Create the engine.

        Args:
            store: Layered action configuration.
            resolver: Input resolver; defaults to one using the real VCS commands.
            options: Execution tunables applied to every run.
            context: Caller-supplied template values overriding computed ones.
        """

        self._store = store
        self._resolver = resolver or InputResolver()
        self._options = options
        self._context = dict(context or {})
        self._catalog: ActionCatalog | None = None

    @classmethod
    def for_root(
        cls,
        root: Path,
        *,
        user_config: Path | None = None,
        repo_config: Path | None = None,
        options: ExecutionOptions | None = None,
    ) -> Engine:
        """Return an engine reading configuration from the default locations."""

        store = ActionConfigStore.for_root(root, user_config=user_config, repo_config=repo_config)
        return cls(store, options=options)

    @property
    def catalog(self) -> ActionCatalog:
        """Return the merged catalog, loading it on first use.

        Raises:
            ConfigError: If any configuration layer is malformed.
        """

        if self._catalog is None:
            self._catalog = self._store.load()
        return self._catalog

    def list_catalog(self, filters: Sequence[str] | None = None) -> list[CatalogEntry]:
        """List the merged catalog."""

        return list_catalog(self.catalog, filters)

    def resolve_inputs(self, source: InputSource) -> InputSet:
        """Resolve the input set for ``source``."""

        return self._resolver.resolve(source)

    def run(
        self,
        input_set: InputSet,
        filters: Sequence[str] = DEFAULT_FILTERS,
        *,
        scheduler: Scheduler | None = None,
    ) -> RunSummary:
        """Run the selected actions and return the aggregated summary."""

        return run_actions(
            self.catalog,
            filters,
            input_set,
            options=self._options,
            context=self._context,
            scheduler=scheduler,
        )


__all__ = ["CatalogEntry", "DEFAULT_FILTERS", "Engine", "list_catalog", "plan", "run_actions"]
