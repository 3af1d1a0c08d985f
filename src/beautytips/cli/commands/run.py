# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command running the selected actions over the resolved inputs."""

from __future__ import annotations

import typer

from ...engine import DEFAULT_FILTERS
from ..options import (
    ACTIONS_OPTION,
    DEBUG_OPTION,
    EMOJI_OPTION,
    FROM_DIR_OPTION,
    FROM_FILES_OPTION,
    FROM_REV_OPTION,
    FROM_VCS_OPTION,
    JOBS_OPTION,
    NO_COLOR_OPTION,
    REPO_CONFIG_OPTION,
    ROOT_OPTION,
    TO_REV_OPTION,
    USER_CONFIG_OPTION,
    VCS_OPTION,
    InputOptions,
    normalize_cli_values,
)
from ..services import build_engine, emit_summary, handle_cli_errors
from ..shared import build_cli_logger


def run_command(
    actions: ACTIONS_OPTION = None,
    root: ROOT_OPTION = None,
    from_dir: FROM_DIR_OPTION = None,
    from_vcs: FROM_VCS_OPTION = False,
    vcs: VCS_OPTION = None,
    from_rev: FROM_REV_OPTION = None,
    to_rev: TO_REV_OPTION = None,
    from_files: FROM_FILES_OPTION = None,
    user_config: USER_CONFIG_OPTION = None,
    repo_config: REPO_CONFIG_OPTION = None,
    jobs: JOBS_OPTION = None,
    debug: DEBUG_OPTION = False,
    emoji: EMOJI_OPTION = True,
    no_color: NO_COLOR_OPTION = False,
) -> None:
    """Run the selected actions and exit with the aggregated status.

    Raises:
        typer.Exit: Always raised with ``0`` on success, ``1`` when any action
            failed, ``2`` for configuration or input errors and ``130`` when
            the run was interrupted.
    """

    logger = build_cli_logger(emoji=emoji, color=False if no_color else None, debug=debug)
    inputs = InputOptions(
        root=root,
        from_dir=from_dir,
        from_vcs=from_vcs,
        vcs=vcs,
        from_rev=from_rev,
        to_rev=to_rev,
        from_files=from_files,
    )
    filters = normalize_cli_values(actions) or DEFAULT_FILTERS
    with handle_cli_errors(logger):
        source = inputs.to_source()
        engine = build_engine(inputs.project_root, user_config=user_config, repo_config=repo_config, jobs=jobs)
        input_set = engine.resolve_inputs(source)
        logger.info(f"Checking {len(input_set)} file(s) from {input_set.provenance.kind.value} inputs")
        summary = engine.run(input_set, filters)
    emit_summary(summary, logger=logger)
    raise typer.Exit(code=summary.exit_code)


def register(app: typer.Typer) -> None:
    """Register the ``run`` command on ``app``."""

    app.command("run")(run_command)


__all__ = ["register", "run_command"]
