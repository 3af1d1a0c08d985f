# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Builtin checks invoked by the packaged ``builtin`` actions.

Each check inspects the given files, returns one message per offending file
and reports success only when no file was flagged.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final

from .constants import ENV_INPUTS, ENV_VCS, ENV_VCS_FROM_REV, ENV_VCS_TO_REV

UTF8_BOM: Final[bytes] = b"\xef\xbb\xbf"
_SIZE_RE: Final[re.Pattern[str]] = re.compile(r"^\s*(\d+)\s*([kmg]?)b?\s*$", re.IGNORECASE)
_SIZE_UNITS: Final[Mapping[str, int]] = {"": 1, "k": 1024, "m": 1024**2, "g": 1024**3}
_LINE_ENDING_RE: Final[re.Pattern[bytes]] = re.compile(rb"\r\n|\r|\n")


@dataclass(slots=True)
class CheckReport:
    """Messages produced by a builtin check."""

    messages: list[str] = field(default_factory=list)
    failed: bool = False

    def flag(self, message: str) -> None:
        """Record ``message`` for an offending file and mark the check failed."""

        self.messages.append(message)
        self.failed = True

    @property
    def exit_code(self) -> int:
        """Return ``1`` when any file was flagged, otherwise ``0``."""

        return 1 if self.failed else 0


class LineEnding(str, Enum):
    """Line-ending styles understood by the mixed-line-endings check."""

    LF = "lf"
    CRLF = "crlf"
    CR = "cr"

    @property
    def sequence(self) -> bytes:
        """Return the bytes that terminate a line in this style."""

        return {LineEnding.LF: b"\n", LineEnding.CRLF: b"\r\n", LineEnding.CR: b"\r"}[self]

    @classmethod
    def from_sequence(cls, sequence: bytes) -> LineEnding:
        """Return the style whose terminator is ``sequence``.

        Raises:
            KeyError: If ``sequence`` is not a recognised line terminator.
        """

        return {b"\n": cls.LF, b"\r\n": cls.CRLF, b"\r": cls.CR}[sequence]


class LineEndingFix(str, Enum):
    """Fix modes for the mixed-line-endings check."""

    OFF = "off"
    AUTO = "auto"
    LF = "lf"
    CRLF = "crlf"
    CR = "cr"


def parse_size(value: str) -> int:
    """Parse a size such as ``50k`` or ``2M`` into bytes (binary units).

    Raises:
        ValueError: If ``value`` is not a valid size.
    """

    match = _SIZE_RE.match(value)
    if match is None:
        raise ValueError(f"invalid size '{value}'")
    return int(match.group(1)) * _SIZE_UNITS[match.group(2).lower()]


def check_large_files(files: Sequence[Path], limit: int) -> CheckReport:
    """Flag files larger than ``limit`` bytes."""

    report = CheckReport()
    for path in files:
        size = path.stat().st_size
        if size > limit:
            report.flag(f"{path}: {size} bytes exceeds the limit of {limit} bytes")
    return report


def check_bom(files: Sequence[Path], *, fix: bool) -> CheckReport:
    """Flag (and optionally strip) a leading UTF-8 byte order mark."""

    report = CheckReport()
    for path in files:
        data = path.read_bytes()
        if not data.startswith(UTF8_BOM):
            continue
        if fix:
            path.write_bytes(data[len(UTF8_BOM) :])
            report.flag(f"{path}: removed byte order mark")
        else:
            report.flag(f"{path}: starts with a byte order mark")
    return report


def line_ending_counts(data: bytes) -> dict[LineEnding, int]:
    """Return how often each line-ending style occurs in ``data``."""

    counts = dict.fromkeys(LineEnding, 0)
    for match in _LINE_ENDING_RE.finditer(data):
        counts[LineEnding.from_sequence(match.group())] += 1
    return counts


def check_mixed_line_endings(files: Sequence[Path], *, fix: LineEndingFix) -> CheckReport:
    """Flag files mixing line-ending styles, optionally normalising them.

    ``AUTO`` rewrites a file to its most common style (ties prefer ``lf``,
    then ``crlf``); a named style rewrites to that style.
    """

    report = CheckReport()
    for path in files:
        data = path.read_bytes()
        counts = line_ending_counts(data)
        used = [ending for ending, count in counts.items() if count]
        if len(used) < 2:
            continue
        if fix is LineEndingFix.OFF:
            summary = ", ".join(f"{ending.value}={counts[ending]}" for ending in used)
            report.flag(f"{path}: mixed line endings ({summary})")
            continue
        target = max(used, key=lambda ending: counts[ending]) if fix is LineEndingFix.AUTO else LineEnding(fix.value)
        path.write_bytes(_LINE_ENDING_RE.sub(target.sequence, data))
        report.flag(f"{path}: normalised line endings to {target.value}")
    return report


def print_environment(files: Sequence[Path], env: Mapping[str, str] | None = None) -> CheckReport:
    """Report the provenance variables and the file list; never fails."""

    environ = os.environ if env is None else env
    report = CheckReport()
    for name in (ENV_INPUTS, ENV_VCS, ENV_VCS_FROM_REV, ENV_VCS_TO_REV):
        if name in environ:
            report.messages.append(f"{name}={environ[name]}")
    report.messages.extend(f"file: {path}" for path in files)
    return report


__all__ = [
    "CheckReport",
    "LineEnding",
    "LineEndingFix",
    "UTF8_BOM",
    "check_bom",
    "check_large_files",
    "check_mixed_line_endings",
    "line_ending_counts",
    "parse_size",
    "print_environment",
]
