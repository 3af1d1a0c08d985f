# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing console helpers with optional colour and emoji support."""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import Final

from rich.console import Console
from rich.text import Text

PACKAGE_LOGGER = "beautytips"


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=8)
def get_console(*, color: bool, emoji: bool, tty: bool) -> Console:
    """Return the shared console for one combination of output settings.

    Args:
        color: Whether ANSI styling may be emitted.
        emoji: Whether Rich renders ``:emoji:`` codes.
        tty: Whether stdout is a terminal; styling needs both ``color`` and
            ``tty``.

    Returns:
        Console: Console writing to the current ``sys.stdout``.
    """

    styled = color and tty
    return Console(
        color_system="auto" if styled else None,
        force_terminal=tty,
        no_color=not styled,
        emoji=emoji,
        soft_wrap=True,
        highlight=False,
    )


# Status line kind -> (emoji prefix, Rich style).
_STATUS: Final[dict[str, tuple[str, str]]] = {
    "info": ("ℹ️ ", "cyan"),
    "ok": ("✅ ", "green"),
    "skipped": ("🚙 ", "dim"),
    "warn": ("⚠️ ", "yellow"),
    "fail": ("❌ ", "red"),
}


def _print_line(msg: str, *, style: str | None, use_emoji: bool, use_color: bool | None = None) -> None:
    tty = detect_tty()
    color_enabled = tty if use_color is None else use_color
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    get_console(color=color_enabled, emoji=use_emoji, tty=tty).print(text)


def _status(kind: str, msg: str, *, use_emoji: bool, use_color: bool | None) -> None:
    prefix, style = _STATUS[kind]
    line = f"{prefix}{msg}" if use_emoji else msg
    _print_line(line, style=style, use_emoji=use_emoji, use_color=use_color)


def plain(msg: str, *, use_color: bool | None = None) -> None:
    """Print ``msg`` without decoration."""

    _print_line(msg, style=None, use_emoji=False, use_color=use_color)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _status("info", msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _status("ok", msg, use_emoji=use_emoji, use_color=use_color)


def skipped(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a not-applicable message."""

    _status("skipped", msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _status("warn", msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _status("fail", msg, use_emoji=use_emoji, use_color=use_color)


def configure_debug_logging(enabled: bool) -> None:
    """Route ``beautytips`` log records at DEBUG level to stderr when ``enabled``."""

    logger = logging.getLogger(PACKAGE_LOGGER)
    if not enabled:
        return
    if not any(getattr(handler, "_beautytips_debug", False) for handler in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        handler._beautytips_debug = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


__all__ = [
    "configure_debug_logging",
    "detect_tty",
    "fail",
    "get_console",
    "info",
    "ok",
    "plain",
    "skipped",
    "warn",
]
