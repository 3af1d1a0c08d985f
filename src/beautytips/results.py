# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Aggregate per-action results into a run summary and exit code."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

from .constants import INTERRUPTED_EXIT_CODE
from .errors import InterruptedRunError
from .models import ActionResult, ActionStatus


class RunState(str, Enum):
    """Run-level outcome, independent of individual results."""

    NOTHING_SELECTED = "nothing_selected"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Ordered results of one run plus run-level state.

    ``results`` follows selection order. ``abandoned`` names invocations that
    were never started because the run was interrupted.
    """

    results: tuple[ActionResult, ...] = ()
    interrupted: bool = False
    abandoned: tuple[str, ...] = field(default_factory=tuple)

    @property
    def state(self) -> RunState:
        """Return the run-level state.

        ``NOTHING_SELECTED`` means the selection was empty, which is distinct
        from a completed run in which every action was not applicable.
        """

        if self.interrupted:
            return RunState.INTERRUPTED
        if not self.results and not self.abandoned:
            return RunState.NOTHING_SELECTED
        return RunState.COMPLETED

    def count(self, status: ActionStatus) -> int:
        """Return the number of results with ``status``."""

        return sum(1 for result in self.results if result.status is status)

    @property
    def passed(self) -> int:
        """Return the number of passed results."""

        return self.count(ActionStatus.PASSED)

    @property
    def failed(self) -> int:
        """Return the number of failed results."""

        return self.count(ActionStatus.FAILED)

    @property
    def not_applicable(self) -> int:
        """Return the number of not-applicable results."""

        return self.count(ActionStatus.NOT_APPLICABLE)

    @property
    def counts(self) -> dict[ActionStatus, int]:
        """Return result counts for every status."""

        return {status: self.count(status) for status in ActionStatus}

    @property
    def all_not_applicable(self) -> bool:
        """Return ``True`` when actions were selected but none had inputs."""

        return bool(self.results) and self.not_applicable == len(self.results)

    @property
    def exit_code(self) -> int:
        """Return the process exit code for this run.

        Any failed result yields ``1``. Otherwise an interrupted run yields
        ``130`` and every other run yields ``0``.
        """

        if self.failed:
            return 1
        if self.interrupted:
            return INTERRUPTED_EXIT_CODE
        return 0

    def raise_for_interrupt(self) -> None:
        """Raise :class:`InterruptedRunError` if the run was interrupted."""

        if self.interrupted:
            raise InterruptedRunError(
                f"Run interrupted after {len(self.results)} result(s); {len(self.abandoned)} action(s) not started",
            )


def aggregate(
    order: Sequence[str],
    results: Mapping[str, ActionResult] | Iterable[ActionResult],
    *,
    interrupted: bool = False,
) -> RunSummary:
    """Combine results into a :class:`RunSummary` ordered by selection.

    Args:
        order: Selected action names in selection order.
        results: Results keyed by action name, or an iterable of results.
        interrupted: Whether the run was cancelled.

    Returns:
        RunSummary: Summary whose results follow ``order``. Selected names
        without a result are reported as abandoned.
    """

    by_name = dict(results) if isinstance(results, Mapping) else {result.name: result for result in results}
    ordered = tuple(by_name[name] for name in order if name in by_name)
    abandoned = tuple(name for name in order if name not in by_name)
    return RunSummary(results=ordered, interrupted=interrupted, abandoned=abandoned)


__all__ = ["RunState", "RunSummary", "aggregate"]
