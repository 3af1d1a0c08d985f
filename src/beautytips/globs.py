# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Path glob matching with ``**`` support and literal separators.

Patterns are matched against root-relative POSIX paths. ``*``, ``?`` and
character classes never match ``/``; a segment consisting solely of ``**``
matches zero or more whole directories.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from fnmatch import translate
from functools import lru_cache

_SEPARATOR = "/"
_RECURSIVE = "**"


@dataclass(frozen=True, slots=True)
class GlobPattern:
    """Compiled glob pattern split into path segments."""

    pattern: str
    segments: tuple[re.Pattern[str] | None, ...]

    def matches(self, relative_path: str) -> bool:
        """Return whether ``relative_path`` matches this pattern.

        Args:
            relative_path: POSIX path relative to the input root.

        Returns:
            bool: ``True`` when every path segment is consumed by the pattern.
        """

        parts = relative_path.split(_SEPARATOR)
        segments = self.segments
        # reachable[j] is True when the first i pattern segments can consume parts[:j].
        reachable = [True] + [False] * len(parts)
        for segment in segments:
            following = [False] * (len(parts) + 1)
            if segment is None:
                seen = False
                for index, value in enumerate(reachable):
                    seen = seen or value
                    following[index] = seen
            else:
                for index, part in enumerate(parts):
                    if reachable[index] and segment.fullmatch(part):
                        following[index + 1] = True
            reachable = following
            if not any(reachable):
                return False
        return reachable[-1]


@lru_cache(maxsize=1024)
def compile_glob(pattern: str) -> GlobPattern:
    """Compile ``pattern`` into a :class:`GlobPattern`.

    Args:
        pattern: Glob expression such as ``**/*.py`` or ``docs/*.md``.

    Returns:
        GlobPattern: Compiled matcher.

    Raises:
        ValueError: If the pattern is empty, absolute, or misuses ``**``.
    """

    if not pattern:
        raise ValueError("glob pattern must not be empty")
    if pattern.startswith(_SEPARATOR):
        raise ValueError(f"glob pattern '{pattern}' must be relative")
    segments: list[re.Pattern[str] | None] = []
    for raw in pattern.split(_SEPARATOR):
        if raw == _RECURSIVE:
            if not segments or segments[-1] is not None:
                segments.append(None)
            continue
        if _RECURSIVE in raw:
            raise ValueError(f"glob pattern '{pattern}' uses '**' inside a path segment")
        if not raw:
            raise ValueError(f"glob pattern '{pattern}' contains an empty path segment")
        segments.append(re.compile(translate(raw)))
    return GlobPattern(pattern=pattern, segments=tuple(segments))


def matches_any(relative_path: str, patterns: tuple[str, ...]) -> bool:
    """Return whether ``relative_path`` matches at least one of ``patterns``."""

    return any(compile_glob(pattern).matches(relative_path) for pattern in patterns)


__all__ = ["GlobPattern", "compile_glob", "matches_any"]
