# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Service helpers shared by CLI commands."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

import typer

from ..constants import USAGE_EXIT_CODE
from ..engine import CatalogEntry, Engine
from ..errors import ConfigError, VcsError, WalkError
from ..execution import ExecutionOptions
from ..models import ActionResult, ActionStatus
from ..results import RunState, RunSummary
from .shared import CLIError, CLILogger


@contextmanager
def handle_cli_errors(logger: CLILogger) -> Iterator[None]:
    """Translate fatal engine errors into a failure line and an exit status.

    Raises:
        typer.Exit: When a configuration, input or usage error occurs.
    """

    try:
        yield
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except ConfigError as exc:
        logger.fail(f"Configuration error: {exc}")
        raise typer.Exit(code=USAGE_EXIT_CODE) from exc
    except (VcsError, WalkError) as exc:
        logger.fail(f"Input resolution failed: {exc}")
        raise typer.Exit(code=USAGE_EXIT_CODE) from exc


def build_engine(
    project_root: Path,
    *,
    user_config: Path | None,
    repo_config: Path | None,
    jobs: int | None = None,
) -> Engine:
    """Return an engine for ``project_root`` honouring CLI overrides."""

    options = ExecutionOptions(jobs=jobs) if jobs else None
    return Engine.for_root(project_root, user_config=user_config, repo_config=repo_config, options=options)


def emit_catalog(entries: Sequence[CatalogEntry], *, logger: CLILogger) -> None:
    """Print one line per catalog entry."""

    if not entries:
        logger.warn("No actions defined")
        return
    width = max(len(entry.name) for entry in entries)
    for entry in entries:
        line = f"{entry.name:<{width}}  [{entry.origin}]"
        if entry.description:
            line = f"{line}  {entry.description}"
        logger.echo(line)


def _emit_result(result: ActionResult, *, logger: CLILogger) -> None:
    """Print the status line for ``result`` followed by any retained output."""

    if result.status is ActionStatus.PASSED:
        logger.ok(f"{result.name}: OK")
    elif result.status is ActionStatus.NOT_APPLICABLE:
        logger.skipped(f"{result.name}: NOT APPLICABLE")
    else:
        detail = result.error or f"exit code {result.exit_code}"
        logger.fail(f"{result.name}: FAILED ({detail})")
    for stream in (result.stdout, result.stderr):
        text = stream.rstrip("\n")
        if text:
            logger.echo(text)


def emit_summary(summary: RunSummary, *, logger: CLILogger) -> None:
    """Print per-action results in selection order followed by the totals."""

    if summary.state is RunState.NOTHING_SELECTED:
        logger.warn("No actions matched the selection; nothing to do")
        return
    for result in summary.results:
        _emit_result(result, logger=logger)
    if summary.interrupted:
        logger.warn(f"Run interrupted; {len(summary.abandoned)} action(s) did not complete")
    totals = f"{summary.passed} passed, {summary.failed} failed, {summary.not_applicable} not applicable"
    if summary.failed:
        logger.fail(totals)
    elif summary.all_not_applicable:
        logger.skipped(f"{totals}; no selected action applied to the inputs")
    else:
        logger.ok(totals)


__all__ = ["build_engine", "emit_catalog", "emit_summary", "handle_cli_errors"]
