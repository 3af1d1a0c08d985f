# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors)."""

from __future__ import annotations

from dataclasses import dataclass

from ..logging import configure_debug_logging, fail, info, ok, plain, skipped, warn


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around the console helpers respecting CLI presentation flags."""

    use_emoji: bool
    use_color: bool | None = None

    def fail(self, message: str) -> None:
        """Print a failure line."""

        fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        """Print a warning line."""

        warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def info(self, message: str) -> None:
        """Print an informational line."""

        info(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def ok(self, message: str) -> None:
        """Print a success line."""

        ok(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def skipped(self, message: str) -> None:
        """Print a not-applicable line."""

        skipped(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout without decoration."""

        plain(message, use_color=self.use_color)


def build_cli_logger(*, emoji: bool, color: bool | None = None, debug: bool = False) -> CLILogger:
    """Return a ``CLILogger`` and enable debug logging when requested.

    Args:
        emoji: Whether output may include emoji glyphs.
        color: Explicit colour preference; ``None`` follows TTY detection.
        debug: Whether engine debug records are written to stderr.

    Returns:
        CLILogger: Logger bound to the shared console manager.
    """

    configure_debug_logging(debug)
    return CLILogger(use_emoji=emoji, use_color=color)


__all__ = ["CLIError", "CLILogger", "build_cli_logger"]
