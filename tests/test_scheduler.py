# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for concurrent and sequential scheduling."""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Callable
from pathlib import Path

import pytest

from beautytips.context import TemplateContext
from beautytips.execution import ExecutionOptions, Scheduler
from beautytips.filtering import plan_invocations
from beautytips.models import ActionDefinition, ActionInvocation, ActionResult, ActionStatus, NotApplicable
from beautytips.results import RunState

from .helpers import make_action, make_input_set, python_command


class RecordingRunner:
    """Fake runner tracking how many invocations overlap."""

    def __init__(self, delay: float = 0.05, hook: Callable[[ActionInvocation], None] | None = None) -> None:
        self.delay = delay
        self.hook = hook
        self.lock = threading.Lock()
        self.active = 0
        self.peak = 0
        self.overlap_during_sequential: list[int] = []
        self.started: list[str] = []

    def __call__(self, invocation: ActionInvocation) -> ActionResult:
        with self.lock:
            if invocation.action.run_sequentially:
                self.overlap_during_sequential.append(self.active)
            self.active += 1
            self.peak = max(self.peak, self.active)
            self.started.append(invocation.name)
        try:
            if self.hook is not None:
                self.hook(invocation)
            time.sleep(self.delay)
        finally:
            with self.lock:
                self.active -= 1
        return ActionResult(name=invocation.name, status=ActionStatus.PASSED, exit_code=0)


def _plan(tmp_path: Path, actions: list[ActionDefinition]) -> list[ActionInvocation | NotApplicable]:
    return plan_invocations(actions, make_input_set(tmp_path, ["a.py"]))


def test_concurrent_actions_overlap(tmp_path: Path) -> None:
    runner = RecordingRunner(delay=0.2)
    planned = _plan(tmp_path, [make_action(f"x/a{index}") for index in range(4)])

    summary = Scheduler(runner, options=ExecutionOptions(jobs=4)).run(planned)

    assert summary.passed == 4
    assert runner.peak > 1


def test_jobs_bound_concurrency(tmp_path: Path) -> None:
    runner = RecordingRunner()
    planned = _plan(tmp_path, [make_action(f"x/a{index}") for index in range(5)])

    Scheduler(runner, options=ExecutionOptions(jobs=2)).run(planned)

    assert runner.peak <= 2


def test_sequential_actions_never_overlap(tmp_path: Path) -> None:
    runner = RecordingRunner()
    actions = [
        make_action("x/c1"),
        make_action("x/c2"),
        make_action("x/s1", **{"run-sequentially": True}),
        make_action("x/c3"),
        make_action("x/s2", **{"run-sequentially": True}),
        make_action("x/c4"),
    ]

    summary = Scheduler(runner, options=ExecutionOptions(jobs=4)).run(_plan(tmp_path, actions))

    assert runner.overlap_during_sequential == [0, 0]
    assert runner.started.index("x/s1") < runner.started.index("x/s2")
    assert runner.started.index("x/s1") > max(runner.started.index("x/c1"), runner.started.index("x/c2"))
    assert [result.name for result in summary.results] == [action.name for action in actions]


def test_sequential_action_waits_for_real_processes(tmp_path: Path) -> None:
    marker = tmp_path / "marker"
    slow = python_command(
        "import pathlib, sys, time; p = pathlib.Path(sys.argv[1]); p.write_text('busy'); "
        "time.sleep(0.3); p.write_text('done')",
        str(marker),
    )
    check = python_command(
        "import pathlib, sys; sys.exit(pathlib.Path(sys.argv[1]).read_text() != 'done')",
        str(marker),
    )
    actions = [make_action("x/slow", slow), make_action("x/check", check, **{"run-sequentially": True})]

    summary = Scheduler(options=ExecutionOptions(jobs=2)).run(_plan(tmp_path, actions))

    assert [result.status for result in summary.results] == [ActionStatus.PASSED, ActionStatus.PASSED]


def test_not_applicable_entries_are_recorded_in_order(tmp_path: Path) -> None:
    runner = RecordingRunner(delay=0)
    actions = [make_action("x/py", inputs={"files": ["**/*.py"]}), make_action("x/rs", inputs={"files": ["**/*.rs"]})]

    summary = Scheduler(runner, options=ExecutionOptions(jobs=2)).run(_plan(tmp_path, actions))

    assert [(result.name, result.status) for result in summary.results] == [
        ("x/py", ActionStatus.PASSED),
        ("x/rs", ActionStatus.NOT_APPLICABLE),
    ]
    assert runner.started == ["x/py"]


def test_cancel_stops_dispatching(tmp_path: Path) -> None:
    scheduler: Scheduler

    def cancel_on_first(invocation: ActionInvocation) -> None:
        if invocation.name == "x/first":
            scheduler.cancel()

    runner = RecordingRunner(delay=0, hook=cancel_on_first)
    scheduler = Scheduler(runner, options=ExecutionOptions(jobs=1))
    actions = [
        make_action("x/first"),
        make_action("x/second", **{"run-sequentially": True}),
        make_action("x/third"),
        make_action("x/none", inputs={"files": ["**/*.rs"]}),
    ]

    summary = scheduler.run(_plan(tmp_path, actions))

    assert scheduler.cancelled
    assert summary.state is RunState.INTERRUPTED
    assert [result.name for result in summary.results] == ["x/first", "x/none"]
    assert summary.abandoned == ("x/second", "x/third")
    assert summary.exit_code == 130


def test_keyboard_interrupt_cancels_the_run(tmp_path: Path) -> None:
    def interrupt(invocation: ActionInvocation) -> None:
        if invocation.name == "x/seq":
            raise KeyboardInterrupt

    runner = RecordingRunner(delay=0, hook=interrupt)
    actions = [make_action("x/a"), make_action("x/seq", **{"run-sequentially": True}), make_action("x/b")]

    summary = Scheduler(runner, options=ExecutionOptions(jobs=2)).run(_plan(tmp_path, actions))

    assert summary.interrupted
    assert [result.name for result in summary.results] == ["x/a"]
    assert summary.abandoned == ("x/seq", "x/b")


@pytest.mark.skipif(os.name != "posix", reason="process groups are POSIX-only")
def test_cancel_terminates_running_processes(tmp_path: Path) -> None:
    sleeper = python_command("import time; time.sleep(30)")
    actions = [make_action("x/sleep_one", sleeper), make_action("x/sleep_two", sleeper)]
    scheduler = Scheduler(options=ExecutionOptions(jobs=2))
    timer = threading.Timer(0.5, scheduler.cancel)

    started = time.monotonic()
    timer.start()
    try:
        summary = scheduler.run(_plan(tmp_path, actions))
    finally:
        timer.cancel()

    assert time.monotonic() - started < 15
    assert summary.interrupted
    assert summary.results == ()
    assert summary.abandoned == ("x/sleep_one", "x/sleep_two")


def test_unexpected_runner_error_fails_only_that_action(tmp_path: Path) -> None:
    def explode(invocation: ActionInvocation) -> None:
        if invocation.name in {"x/bad", "x/bad_seq"}:
            raise RuntimeError("boom")

    runner = RecordingRunner(delay=0, hook=explode)
    actions = [
        make_action("x/good"),
        make_action("x/bad"),
        make_action("x/bad_seq", **{"run-sequentially": True}),
        make_action("x/after"),
    ]

    summary = Scheduler(runner, options=ExecutionOptions(jobs=2)).run(_plan(tmp_path, actions))

    assert summary.state is RunState.COMPLETED
    assert [(result.name, result.status) for result in summary.results] == [
        ("x/good", ActionStatus.PASSED),
        ("x/bad", ActionStatus.FAILED),
        ("x/bad_seq", ActionStatus.FAILED),
        ("x/after", ActionStatus.PASSED),
    ]
    assert summary.results[1].error == "unexpected error: RuntimeError: boom"
    assert summary.exit_code == 1


def test_failing_context_provider_keeps_sibling_results(tmp_path: Path) -> None:
    def explode(invocation: ActionInvocation) -> str:
        raise RuntimeError("provider exploded")

    actions = [
        make_action("demo/good", python_command("pass")),
        make_action("demo/bad", "cargo build -p {{target}}"),
    ]
    scheduler = Scheduler(options=ExecutionOptions(jobs=2), context=TemplateContext(providers={"target": explode}))

    summary = scheduler.run(_plan(tmp_path, actions))

    good, bad = summary.results
    assert good.status is ActionStatus.PASSED
    assert bad.status is ActionStatus.FAILED
    assert bad.error is not None
    assert "provider exploded" in bad.error


def test_execution_options_validate_jobs() -> None:
    with pytest.raises(ValueError):
        ExecutionOptions(jobs=0)
    assert ExecutionOptions().jobs >= 1
