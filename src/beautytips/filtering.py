# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-action input filtering."""

from __future__ import annotations

from collections.abc import Sequence

from .globs import matches_any
from .models import ActionDefinition, ActionInvocation, InputSet, NotApplicable


def filter_inputs(action: ActionDefinition, input_set: InputSet) -> ActionInvocation | NotApplicable:
    """Apply ``action``'s ``inputs.files`` patterns to ``input_set``.

    Patterns are matched against root-relative paths. An action without
    patterns receives the whole input set. Emptiness is decided per action.

    Args:
        action: Definition whose filters are applied.
        input_set: Working file set of the run.

    Returns:
        ActionInvocation | NotApplicable: The invocation when at least one file
        matches, otherwise a not-applicable marker.
    """

    patterns = action.inputs.files
    if patterns:
        files = tuple(path for path in input_set.files if matches_any(input_set.relative(path), patterns))
    else:
        files = input_set.files
    if not files:
        return NotApplicable(action=action)
    return ActionInvocation(action=action, files=files, input_set=input_set)


def plan_invocations(
    actions: Sequence[ActionDefinition],
    input_set: InputSet,
) -> list[ActionInvocation | NotApplicable]:
    """Filter every selected action, preserving selection order."""

    return [filter_inputs(action, input_set) for action in actions]


__all__ = ["filter_inputs", "plan_invocations"]
