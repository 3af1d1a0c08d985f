# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Error taxonomy shared by every stage of an action run.

Configuration and input-resolution errors are fatal to the whole run.
Template and spawn errors are scoped to a single invocation and surface as
``failed`` results rather than propagating out of the scheduler.
"""

from __future__ import annotations

from collections.abc import Sequence


class BeautyTipsError(Exception):
    """Base class for all engine errors."""


class ConfigError(BeautyTipsError):
    """Raised when an action document is malformed or conflicting."""

    def __init__(self, message: str, *, source: str | None = None, record: str | None = None) -> None:
        """Initialise the error with optional source and record context.

        Args:
            message: Description of the problem.
            source: Name of the configuration layer that produced the record.
            record: Identifier (name or index) of the offending record.
        """

        self.source = source
        self.record = record
        prefix_parts = [part for part in (source, record) if part]
        prefix = f"{': '.join(prefix_parts)}: " if prefix_parts else ""
        super().__init__(f"{prefix}{message}")


class VcsError(BeautyTipsError):
    """Raised when a version control request cannot be satisfied."""


class WalkError(BeautyTipsError):
    """Raised when a directory root cannot be read."""


class TemplateError(BeautyTipsError):
    """Raised when a command template marker cannot be expanded."""

    def __init__(self, action: str, marker: str, *, reason: str | None = None) -> None:
        """Initialise the error.

        Args:
            action: Name of the action whose template failed.
            marker: Marker name, or the offending template text when ``reason``
                is given.
            reason: Why expansion failed; ``None`` means the name is unknown.
        """

        self.action = action
        self.marker = marker
        self.reason = reason
        if reason is None:
            message = f"Action '{action}' references unresolved template marker '{{{{{marker}}}}}'"
        else:
            message = f"Action '{action}' cannot expand template marker '{marker}': {reason}"
        super().__init__(message)


class SpawnError(BeautyTipsError):
    """Raised when a subprocess could not be launched."""

    def __init__(self, argv: Sequence[str], reason: str) -> None:
        self.argv = tuple(argv)
        self.reason = reason
        executable = self.argv[0] if self.argv else "<empty>"
        super().__init__(f"Failed to launch '{executable}': {reason}")


class InterruptedRunError(BeautyTipsError):
    """Raised on request when a run was cancelled before completion."""


__all__ = [
    "BeautyTipsError",
    "ConfigError",
    "InterruptedRunError",
    "SpawnError",
    "TemplateError",
    "VcsError",
    "WalkError",
]
