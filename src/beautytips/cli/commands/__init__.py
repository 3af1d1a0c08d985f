# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

import typer

from . import builtin, catalog, files, run

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register every beautytips command on ``app``.

    Args:
        app: Typer application receiving command registrations.
    """

    catalog.register(app)
    files.register(app)
    run.register(app)
    builtin.register(app)
