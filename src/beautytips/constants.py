# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Constants shared across the engine."""

from __future__ import annotations

import math
import os
from typing import Final

ENV_INPUTS: Final[str] = "BEAUTYTIPS_INPUTS"
ENV_VCS: Final[str] = "BEAUTYTIPS_VCS"
ENV_VCS_FROM_REV: Final[str] = "BEAUTYTIPS_VCS_FROM_REV"
ENV_VCS_TO_REV: Final[str] = "BEAUTYTIPS_VCS_TO_REV"

RESERVED_ENV_NAMES: Final[frozenset[str]] = frozenset({ENV_INPUTS, ENV_VCS, ENV_VCS_FROM_REV, ENV_VCS_TO_REV})

NAME_SEPARATOR: Final[str] = "/"
ALL_SUFFIX: Final[str] = "_all"
ALL_KEYWORD: Final[str] = "all"

SELF_TOKEN: Final[str] = "{BEAUTY_TIPS}"
FILES_MARKER: Final[str] = "files"
FILE_MARKER: Final[str] = "file"

USER_CONFIG_DIRNAME: Final[str] = "beautytips"
USER_CONFIG_FILENAME: Final[str] = "config.toml"
REPO_CONFIG_FILENAME: Final[str] = ".beautytips.toml"

BUILTIN_DOCUMENTS: Final[tuple[str, ...]] = ("builtin.toml", "ruff.toml", "rust.toml")

# Directories never descended into by the filesystem walker.
ALWAYS_EXCLUDE_DIRS: Final[frozenset[str]] = frozenset(
    {
        ".git",
        ".jj",
        ".hg",
        ".svn",
        "__pycache__",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
        ".tox",
        ".venv",
        "node_modules",
    },
)

DEFAULT_MAX_OUTPUT_BYTES: Final[int] = 1024 * 1024
MAX_DEFAULT_JOBS: Final[int] = 16
INTERRUPTED_EXIT_CODE: Final[int] = 130
USAGE_EXIT_CODE: Final[int] = 2


def default_parallel_jobs() -> int:
    """Return 75% of available CPU cores (minimum of 1)."""

    cores = os.cpu_count() or 1
    return min(MAX_DEFAULT_JOBS, max(1, math.floor(cores * 0.75)))


__all__ = [
    "ALL_KEYWORD",
    "ALL_SUFFIX",
    "ALWAYS_EXCLUDE_DIRS",
    "BUILTIN_DOCUMENTS",
    "DEFAULT_MAX_OUTPUT_BYTES",
    "ENV_INPUTS",
    "ENV_VCS",
    "ENV_VCS_FROM_REV",
    "ENV_VCS_TO_REV",
    "FILES_MARKER",
    "FILE_MARKER",
    "INTERRUPTED_EXIT_CODE",
    "MAX_DEFAULT_JOBS",
    "NAME_SEPARATOR",
    "REPO_CONFIG_FILENAME",
    "RESERVED_ENV_NAMES",
    "SELF_TOKEN",
    "USAGE_EXIT_CODE",
    "USER_CONFIG_DIRNAME",
    "USER_CONFIG_FILENAME",
    "default_parallel_jobs",
]
