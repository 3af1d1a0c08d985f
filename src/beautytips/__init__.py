# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Action resolution and execution engine for project checks and fixes."""

from __future__ import annotations

from .catalog import ActionCatalog
from .config import ActionConfigStore, load_catalog
from .engine import DEFAULT_FILTERS, CatalogEntry, Engine, list_catalog, run_actions
from .errors import (
    BeautyTipsError,
    ConfigError,
    InterruptedRunError,
    SpawnError,
    TemplateError,
    VcsError,
    WalkError,
)
from .execution import ExecutionOptions, Scheduler
from .inputs import DirectorySource, FileListSource, VcsSource, resolve_inputs
from .models import (
    ActionDefinition,
    ActionGroup,
    ActionResult,
    ActionStatus,
    InputKind,
    InputProvenance,
    InputSet,
    ShowOutput,
)
from .results import RunState, RunSummary

__version__ = "0.1.0"

__all__ = [
    "ActionCatalog",
    "ActionConfigStore",
    "ActionDefinition",
    "ActionGroup",
    "ActionResult",
    "ActionStatus",
    "BeautyTipsError",
    "CatalogEntry",
    "ConfigError",
    "DEFAULT_FILTERS",
    "DirectorySource",
    "Engine",
    "ExecutionOptions",
    "FileListSource",
    "InputKind",
    "InputProvenance",
    "InputSet",
    "InterruptedRunError",
    "RunState",
    "RunSummary",
    "Scheduler",
    "ShowOutput",
    "SpawnError",
    "TemplateError",
    "VcsError",
    "VcsSource",
    "WalkError",
    "__version__",
    "list_catalog",
    "load_catalog",
    "resolve_inputs",
    "run_actions",
]
