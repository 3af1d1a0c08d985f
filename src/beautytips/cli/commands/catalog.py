# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command listing the merged action catalog."""

from __future__ import annotations

from pathlib import Path

import typer

from ..options import (
    ACTIONS_OPTION,
    DEBUG_OPTION,
    EMOJI_OPTION,
    NO_COLOR_OPTION,
    REPO_CONFIG_OPTION,
    ROOT_OPTION,
    USER_CONFIG_OPTION,
    normalize_cli_values,
)
from ..services import build_engine, emit_catalog, handle_cli_errors
from ..shared import build_cli_logger


def list_actions_command(
    actions: ACTIONS_OPTION = None,
    root: ROOT_OPTION = None,
    user_config: USER_CONFIG_OPTION = None,
    repo_config: REPO_CONFIG_OPTION = None,
    debug: DEBUG_OPTION = False,
    emoji: EMOJI_OPTION = True,
    no_color: NO_COLOR_OPTION = False,
) -> None:
    """List every known action with the layer that defined it.

    Raises:
        typer.Exit: With status 2 when the configuration is invalid.
    """

    logger = build_cli_logger(emoji=emoji, color=False if no_color else None, debug=debug)
    project_root = (root or Path.cwd()).resolve()
    with handle_cli_errors(logger):
        engine = build_engine(project_root, user_config=user_config, repo_config=repo_config)
        entries = engine.list_catalog(normalize_cli_values(actions) or None)
    emit_catalog(entries, logger=logger)


def register(app: typer.Typer) -> None:
    """Register the ``list-actions`` command on ``app``."""

    app.command("list-actions")(list_actions_command)


__all__ = ["list_actions_command", "register"]
