# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run one invocation and turn its exit status into an :class:`ActionResult`."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from pathlib import Path
from textwrap import shorten
from typing import Protocol

from ..commands import BuiltCommand, build_commands
from ..constants import DEFAULT_MAX_OUTPUT_BYTES
from ..context import TemplateContext
from ..errors import InterruptedRunError, SpawnError, TemplateError
from ..models import ActionInvocation, ActionResult, ActionStatus, ShowOutput
from ..process import ProcessRegistry, spawn_and_capture

LOGGER = logging.getLogger(__name__)


class InvocationRunner(Protocol):
    """Callable executing one invocation to completion."""

    def __call__(self, invocation: ActionInvocation) -> ActionResult:
        """Return the result of running ``invocation``.

        Raises:
            InterruptedRunError: If the run was cancelled before or while the
                invocation was running.
        """
        ...


class ActionRunner(InvocationRunner):
    """Default runner spawning the invocation's command lines."""

    def __init__(
        self,
        *,
        registry: ProcessRegistry,
        context: TemplateContext | None = None,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
        base_env: Mapping[str, str] | None = None,
    ) -> None:
        """Create the runner.

        Args:
            registry: Registry tracking spawned children for cancellation.
            context: Source of named template values.
            max_output_bytes: Upper bound on retained bytes per stream.
            base_env: Starting child environment; defaults to ``os.environ``.
        """

        self._registry = registry
        self._context = context or TemplateContext()
        self._max_output_bytes = max_output_bytes
        self._base_env = base_env

    def __call__(self, invocation: ActionInvocation) -> ActionResult:
        """Build and run every command line of ``invocation``.

        Template and launch errors become a failed result. The action fails
        when any of its command lines exits with a status other than the
        action's expected exit code.

        Args:
            invocation: Action paired with its filtered files.

        Returns:
            ActionResult: Outcome with output kept according to the action's
            ``show-output`` policy.

        Raises:
            InterruptedRunError: If the run was cancelled before the
                invocation started or while one of its commands was running.
        """

        action = invocation.action
        started = time.monotonic()
        if self._registry.cancelled:
            raise InterruptedRunError(f"{action.name} was not started")
        try:
            commands = build_commands(invocation, self._context, base_env=self._base_env)
        except TemplateError as exc:
            LOGGER.warning("%s", exc)
            return ActionResult(name=action.name, status=ActionStatus.FAILED, error=str(exc))
        if not commands:
            LOGGER.debug("%s expanded to no command lines", action.name)
            return ActionResult(name=action.name, status=ActionStatus.NOT_APPLICABLE)

        policy = action.show_output
        single = len(commands) == 1
        stdout_parts: list[str] = []
        stderr_parts: list[str] = []
        exit_code = 0
        failed = False
        for index, command in enumerate(commands):
            if index and self._registry.cancelled:
                raise InterruptedRunError(f"{action.name} was stopped after {index} of {len(commands)} command(s)")
            LOGGER.debug("Running %s: %s", action.name, command.display())
            try:
                captured = spawn_and_capture(
                    command.argv,
                    cwd=command.cwd,
                    env=command.env,
                    capture=policy is not ShowOutput.NEVER,
                    max_output_bytes=self._max_output_bytes,
                    registry=self._registry,
                    retain=(lambda code: policy.retains(passed=code == action.exit_code)) if single else None,
                )
            except SpawnError as exc:
                LOGGER.warning("%s: %s", action.name, exc)
                return ActionResult(
                    name=action.name,
                    status=ActionStatus.FAILED,
                    error=str(exc),
                    duration=time.monotonic() - started,
                )
            if captured.terminated:
                raise InterruptedRunError(f"{action.name} was terminated")
            stdout_parts.append(captured.stdout)
            stderr_parts.append(captured.stderr)
            if captured.returncode != action.exit_code:
                failed = True
                exit_code = captured.returncode
                _log_action_failure(command, invocation.files, captured.stderr or captured.stdout)

        passed = not failed
        keep = policy.retains(passed=passed)
        return ActionResult(
            name=action.name,
            status=ActionStatus.PASSED if passed else ActionStatus.FAILED,
            exit_code=exit_code if failed else action.exit_code,
            stdout=_join_output(stdout_parts) if keep else "",
            stderr=_join_output(stderr_parts) if keep else "",
            duration=time.monotonic() - started,
        )


def _join_output(parts: Sequence[str]) -> str:
    """Concatenate per-command output, ending each non-empty part with a newline."""

    return "".join(part if part.endswith("\n") or not part else f"{part}\n" for part in parts)


def _log_action_failure(command: BuiltCommand, files: Sequence[Path], output: str) -> None:
    """Emit a debug record describing a failed command line."""

    details = [f"command: {command.display()}", f"cwd: {command.cwd}"]
    if files_repr := _summarize_files(files, command.cwd):
        details.append(f"files: {files_repr}")
    if tail := _last_non_empty_line(output.splitlines()):
        details.append(f"output: {tail}")
    LOGGER.debug("Command failed (%s)", "; ".join(details))


def _summarize_files(files: Sequence[Path], root: Path) -> str | None:
    """Return a compact string summarising target ``files`` relative to *root*."""

    if not files:
        return None
    display: list[str] = []
    for path in files[:5]:
        try:
            display.append(path.relative_to(root).as_posix())
        except ValueError:
            display.append(str(path))
    remaining = len(files) - len(display)
    if remaining > 0:
        display.append(f"… (+{remaining} more)")
    return ", ".join(display)


def _last_non_empty_line(lines: Sequence[str]) -> str | None:
    """Return the last non-empty line from ``lines`` truncated for readability."""

    for raw_line in reversed(lines):
        hint = raw_line.strip()
        if hint:
            return shorten(hint, width=160, placeholder="…")
    return None


__all__ = ["ActionRunner", "InvocationRunner"]
