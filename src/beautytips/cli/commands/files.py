# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command printing the resolved input set."""

from __future__ import annotations

import typer

from ...inputs import resolve_inputs
from ..options import (
    DEBUG_OPTION,
    EMOJI_OPTION,
    FROM_DIR_OPTION,
    FROM_FILES_OPTION,
    FROM_REV_OPTION,
    FROM_VCS_OPTION,
    NO_COLOR_OPTION,
    ROOT_OPTION,
    TO_REV_OPTION,
    VCS_OPTION,
    InputOptions,
)
from ..services import handle_cli_errors
from ..shared import build_cli_logger


def list_files_command(
    root: ROOT_OPTION = None,
    from_dir: FROM_DIR_OPTION = None,
    from_vcs: FROM_VCS_OPTION = False,
    vcs: VCS_OPTION = None,
    from_rev: FROM_REV_OPTION = None,
    to_rev: TO_REV_OPTION = None,
    from_files: FROM_FILES_OPTION = None,
    debug: DEBUG_OPTION = False,
    emoji: EMOJI_OPTION = True,
    no_color: NO_COLOR_OPTION = False,
) -> None:
    """Print the files an action run would receive, relative to the root."""

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
    with handle_cli_errors(logger):
        input_set = resolve_inputs(inputs.to_source())
    for path in input_set:
        logger.echo(input_set.relative(path))


def register(app: typer.Typer) -> None:
    """Register the ``list-files`` command on ``app``."""

    app.command("list-files")(list_files_command)


__all__ = ["list_files_command", "register"]
