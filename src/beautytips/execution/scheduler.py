# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Concurrency-aware scheduling of planned invocations.

Concurrent invocations are dispatched to a bounded thread pool in selection
order. A sequential invocation first waits for every in-flight invocation to
finish and then runs alone on the dispatching thread, so it never overlaps
with anything else and sequential invocations keep their relative order.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from functools import partial
from typing import Final

from ..constants import DEFAULT_MAX_OUTPUT_BYTES, default_parallel_jobs
from ..context import TemplateContext
from ..errors import InterruptedRunError
from ..models import ActionInvocation, ActionResult, ActionStatus, NotApplicable
from ..process import ProcessRegistry
from ..results import RunSummary, aggregate
from .runner import ActionRunner, InvocationRunner

LOGGER = logging.getLogger(__name__)

_POLL_SECONDS: Final[float] = 0.1

PlannedInvocation = ActionInvocation | NotApplicable


@dataclass(frozen=True, slots=True)
class ExecutionOptions:
    """Tunables for one run."""

    jobs: int = field(default_factory=default_parallel_jobs)
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES
    base_env: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        if self.jobs < 1:
            raise ValueError("jobs must be at least 1")
        if self.max_output_bytes < 0:
            raise ValueError("max_output_bytes must not be negative")


class Scheduler:
    """Run planned invocations and aggregate their results."""

    def __init__(
        self,
        runner: InvocationRunner | None = None,
        *,
        options: ExecutionOptions | None = None,
        context: TemplateContext | None = None,
    ) -> None:
        """Create the scheduler.

        Args:
            runner: Optional runner for a single invocation; defaults to an
                :class:`ActionRunner` sharing this scheduler's process registry.
            options: Execution tunables.
            context: Template context passed to the default runner.
        """

        self.options = options or ExecutionOptions()
        self._registry = ProcessRegistry()
        self._cancel_event = threading.Event()
        self._runner = runner or ActionRunner(
            registry=self._registry,
            context=context,
            max_output_bytes=self.options.max_output_bytes,
            base_env=self.options.base_env,
        )

    @property
    def cancelled(self) -> bool:
        """Return ``True`` once the run has been cancelled."""

        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """Stop dispatching and terminate running subprocesses.

        Safe to call from any thread.
        """

        self._cancel_event.set()
        self._registry.terminate_all()

    def run(self, planned: Sequence[PlannedInvocation]) -> RunSummary:
        """Execute ``planned`` and return the ordered summary.

        Not-applicable entries are recorded without running anything. A
        ``KeyboardInterrupt`` while dispatching or waiting cancels the run;
        results completed so far are kept and the summary is flagged as
        interrupted.

        Args:
            planned: Filtered invocations in selection order.

        Returns:
            RunSummary: Results in selection order.
        """

        order = [item.name for item in planned]
        results: dict[str, ActionResult] = {}
        in_flight: dict[Future[ActionResult], ActionInvocation] = {}
        with ThreadPoolExecutor(max_workers=self.options.jobs, thread_name_prefix="beautytips") as executor:
            try:
                self._dispatch(planned, executor, in_flight, results)
                self._drain(in_flight, results)
            except KeyboardInterrupt:
                LOGGER.debug("Interrupted; terminating %d in-flight invocation(s)", len(in_flight))
                self.cancel()
                self._drain(in_flight, results)
        return aggregate(order, results, interrupted=self.cancelled)

    def _dispatch(
        self,
        planned: Sequence[PlannedInvocation],
        executor: ThreadPoolExecutor,
        in_flight: dict[Future[ActionResult], ActionInvocation],
        results: dict[str, ActionResult],
    ) -> None:
        """Submit concurrent invocations and run sequential ones inline.

        Args:
            planned: Filtered invocations in selection order.
            executor: Pool receiving concurrent invocations.
            in_flight: Submitted futures mapped to their invocations.
            results: Results collected so far, keyed by action name.
        """

        for item in planned:
            if isinstance(item, NotApplicable):
                results[item.name] = ActionResult(name=item.name, status=ActionStatus.NOT_APPLICABLE)
                continue
            if self.cancelled:
                continue
            if item.action.run_sequentially:
                self._drain(in_flight, results)
                if self.cancelled:
                    continue
                LOGGER.debug("Running %s exclusively", item.name)
                self._record(item, partial(self._runner, item), results)
                continue
            LOGGER.debug("Dispatching %s", item.name)
            in_flight[executor.submit(self._runner, item)] = item

    def _drain(
        self,
        in_flight: dict[Future[ActionResult], ActionInvocation],
        results: dict[str, ActionResult],
    ) -> None:
        """Wait for ``in_flight`` to empty, recording each result as it lands.

        After cancellation, futures that have not started are dropped.
        """

        while in_flight:
            done, _ = wait(in_flight, timeout=_POLL_SECONDS, return_when=FIRST_COMPLETED)
            for future in done:
                invocation = in_flight.pop(future)
                self._record(invocation, future.result, results)
            if self.cancelled:
                for future in list(in_flight):
                    if future.cancel():
                        in_flight.pop(future)

    @staticmethod
    def _record(
        invocation: ActionInvocation,
        outcome: Callable[[], ActionResult],
        results: dict[str, ActionResult],
    ) -> None:
        """Store the result produced by ``outcome`` under the invocation's name.

        Interrupted invocations are left out so the summary reports them as
        abandoned. Any other exception becomes a failed result for that
        invocation alone.

        Args:
            invocation: Invocation the outcome belongs to.
            outcome: Callable returning the invocation's result.
            results: Results collected so far, keyed by action name.
        """

        try:
            result = outcome()
        except InterruptedRunError as exc:
            LOGGER.debug("%s", exc)
            return
        except Exception as exc:
            LOGGER.error("Unexpected error while running %s", invocation.name, exc_info=True)
            result = ActionResult(
                name=invocation.name,
                status=ActionStatus.FAILED,
                error=f"unexpected error: {exc.__class__.__name__}: {exc}",
            )
        results[invocation.name] = result


__all__ = ["ExecutionOptions", "PlannedInvocation", "Scheduler"]
