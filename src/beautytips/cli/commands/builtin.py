# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Builtin file checks exposed as ``beautytips builtin <check>``."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from ...builtin_checks import (
    CheckReport,
    LineEndingFix,
    check_bom,
    check_large_files,
    check_mixed_line_endings,
    parse_size,
    print_environment,
)
from ..shared import CLILogger, build_cli_logger

builtin_app = typer.Typer(
    name="builtin",
    help="Checks bundled with beautytips, used by the builtin actions.",
    no_args_is_help=True,
)

FILES_ARGUMENT = Annotated[
    list[Path] | None,
    typer.Argument(help="Files to inspect (pass after '--').", exists=True, dir_okay=False),
]


class Toggle(str, Enum):
    """On/off switch accepted by ``--fix`` on the byte-order-mark check."""

    ON = "on"
    OFF = "off"


def _finish(report: CheckReport, *, logger: CLILogger) -> None:
    """Print the messages of ``report`` and exit with its status."""

    for message in report.messages:
        logger.echo(message)
    raise typer.Exit(code=report.exit_code)


@builtin_app.command("large-files")
def large_files_command(
    files: FILES_ARGUMENT = None,
    size: Annotated[str, typer.Option("--size", help="Largest permitted size, e.g. 50k or 2M.")] = "50k",
) -> None:
    """Flag files larger than ``--size``."""

    try:
        limit = parse_size(size)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--size") from exc
    _finish(check_large_files(files or [], limit), logger=build_cli_logger(emoji=False))


@builtin_app.command("bom")
def bom_command(
    files: FILES_ARGUMENT = None,
    fix: Annotated[Toggle, typer.Option("--fix", help="Strip the byte order mark in place.")] = Toggle.OFF,
) -> None:
    """Flag files starting with a UTF-8 byte order mark."""

    _finish(check_bom(files or [], fix=fix is Toggle.ON), logger=build_cli_logger(emoji=False))


@builtin_app.command("mixed-line-endings")
def mixed_line_endings_command(
    files: FILES_ARGUMENT = None,
    fix: Annotated[
        LineEndingFix,
        typer.Option("--fix", help="Rewrite to the most common style (auto) or a named style."),
    ] = LineEndingFix.OFF,
) -> None:
    """Flag files mixing LF, CRLF and CR line endings."""

    _finish(check_mixed_line_endings(files or [], fix=fix), logger=build_cli_logger(emoji=False))


@builtin_app.command("print-environment")
def print_environment_command(files: FILES_ARGUMENT = None) -> None:
    """Print the provenance variables and the files received."""

    _finish(print_environment(files or []), logger=build_cli_logger(emoji=False))


def register(app: typer.Typer) -> None:
    """Register the ``builtin`` command group on ``app``."""

    app.add_typer(builtin_app, name="builtin")


__all__ = ["builtin_app", "register"]
