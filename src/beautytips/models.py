# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Core data models for action definitions, inputs, invocations and results."""

from __future__ import annotations

import re
import shlex
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    ALL_KEYWORD,
    ALL_SUFFIX,
    ENV_INPUTS,
    ENV_VCS,
    ENV_VCS_FROM_REV,
    ENV_VCS_TO_REV,
    NAME_SEPARATOR,
    RESERVED_ENV_NAMES,
)
from .globs import compile_glob

_IDENTIFIER_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z0-9_]+$")
_ENV_KEY_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ShowOutput(str, Enum):
    """Policy deciding whether captured output is retained."""

    ALWAYS = "always"
    NEVER = "never"
    FAILURE = "failure"
    SUCCESS = "success"

    def retains(self, *, passed: bool) -> bool:
        """Return whether output should be kept for a result.

        Args:
            passed: ``True`` when the invocation succeeded.

        Returns:
            bool: ``True`` when the captured output must be retained.
        """

        if self is ShowOutput.ALWAYS:
            return True
        if self is ShowOutput.NEVER:
            return False
        if self is ShowOutput.FAILURE:
            return not passed
        return passed


def _validate_identifier(value: str, *, what: str) -> str:
    """Return ``value`` when it is a lowercase identifier; raise ``ValueError`` otherwise."""

    if not _IDENTIFIER_RE.match(value):
        raise ValueError(f"{what} '{value}' must be non-empty and use only lowercase ASCII letters, digits or '_'")
    return value


class ActionInputs(BaseModel):
    """File applicability filters declared by an action."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    files: tuple[str, ...] = ()

    @field_validator("files")
    @classmethod
    def _validate_patterns(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for pattern in value:
            compile_glob(pattern)
        return value


class ActionDefinition(BaseModel):
    """Configured invocation of an external tool."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    name: str
    description: str = ""
    command: str
    run_sequentially: bool = Field(default=False, alias="run-sequentially")
    show_output: ShowOutput = Field(default=ShowOutput.FAILURE, alias="show-output")
    environment: tuple[str, ...] = ()
    inputs: ActionInputs = Field(default_factory=ActionInputs)
    exit_code: int = Field(default=0, alias="exit-code")

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        """Require ``namespace/local`` with identifier parts outside the selector forms."""

        if value.count(NAME_SEPARATOR) != 1:
            raise ValueError(f"action name '{value}' must contain exactly one '{NAME_SEPARATOR}'")
        namespace, local = value.split(NAME_SEPARATOR)
        _validate_identifier(namespace, what="namespace")
        _validate_identifier(local, what="action name")
        if local == ALL_KEYWORD or local.endswith(ALL_SUFFIX):
            raise ValueError(f"action name '{value}' collides with the '{ALL_KEYWORD}' selector form")
        return value

    @field_validator("command")
    @classmethod
    def _validate_command(cls, value: str) -> str:
        try:
            tokens = shlex.split(value)
        except ValueError as exc:
            raise ValueError(f"command cannot be parsed: {exc}") from exc
        if not tokens:
            raise ValueError("command must not be empty")
        return value

    @field_validator("environment")
    @classmethod
    def _validate_environment(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Require ``KEY=VALUE`` entries that leave the provenance variables alone."""

        for entry in value:
            key, separator, _ = entry.partition("=")
            if not separator or not _ENV_KEY_RE.match(key):
                raise ValueError(f"environment entry '{entry}' must have the form KEY=VALUE")
            if key in RESERVED_ENV_NAMES:
                raise ValueError(f"environment entry '{entry}' redefines reserved variable {key}")
            if "\0" in entry:
                raise ValueError(f"environment entry for {key} contains a NUL byte")
        return value

    @property
    def namespace(self) -> str:
        """Return the portion of the name before the separator."""

        return self.name.split(NAME_SEPARATOR)[0]

    @property
    def local_name(self) -> str:
        """Return the portion of the name after the separator."""

        return self.name.split(NAME_SEPARATOR)[1]

    def command_tokens(self) -> list[str]:
        """Return the command template split into shell words."""

        return shlex.split(self.command)

    def environment_items(self) -> list[tuple[str, str]]:
        """Return declared environment entries as ordered key/value pairs."""

        items: list[tuple[str, str]] = []
        for entry in self.environment:
            key, _, value = entry.partition("=")
            items.append((key, value))
        return items


class ActionGroup(BaseModel):
    """Named bundle of selector patterns."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    actions: tuple[str, ...] = ()

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        _validate_identifier(value, what="group name")
        if value == ALL_KEYWORD or value.endswith(ALL_SUFFIX):
            raise ValueError(f"group name '{value}' collides with the '{ALL_KEYWORD}' selector form")
        return value


class InputKind(str, Enum):
    """Origin of a run's input file set."""

    DIR = "dir"
    VCS = "vcs"
    FILES = "files"


@dataclass(frozen=True, slots=True)
class InputProvenance:
    """Describe where an :class:`InputSet` came from."""

    kind: InputKind
    vcs: str | None = None
    from_rev: str | None = None
    to_rev: str | None = None

    def environment(self) -> dict[str, str]:
        """Return the provenance variables exported to child processes.

        Returns:
            dict[str, str]: ``BEAUTYTIPS_*`` variables describing the inputs.
        """

        env = {ENV_INPUTS: self.kind.value}
        if self.kind is InputKind.VCS:
            env[ENV_VCS] = self.vcs or ""
            env[ENV_VCS_FROM_REV] = self.from_rev or ""
            env[ENV_VCS_TO_REV] = self.to_rev or ""
        return env


@dataclass(frozen=True, slots=True)
class InputSet:
    """Deduplicated, stably ordered set of absolute file paths."""

    root: Path
    files: tuple[Path, ...]
    provenance: InputProvenance

    def __iter__(self) -> Iterator[Path]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def relative(self, path: Path) -> str:
        """Return ``path`` relative to the root as a POSIX string."""

        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()


@dataclass(frozen=True, slots=True)
class ActionInvocation:
    """Pair an action with its non-empty filtered input list."""

    action: ActionDefinition
    files: tuple[Path, ...]
    input_set: InputSet

    @property
    def name(self) -> str:
        """Return the invoked action's name."""

        return self.action.name


@dataclass(frozen=True, slots=True)
class NotApplicable:
    """Marker produced when an action's filtered input list is empty."""

    action: ActionDefinition

    @property
    def name(self) -> str:
        """Return the skipped action's name."""

        return self.action.name


class ActionStatus(str, Enum):
    """Outcome category for a single invocation."""

    PASSED = "passed"
    FAILED = "failed"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Immutable outcome of one invocation.

    ``stdout``/``stderr`` are empty unless the action's output policy retained
    them. ``error`` carries launch or templating failures, which have no
    ``exit_code``.
    """

    name: str
    status: ActionStatus
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    duration: float = 0.0

    @property
    def failed(self) -> bool:
        """Return ``True`` when the invocation failed."""

        return self.status is ActionStatus.FAILED

    @property
    def has_output(self) -> bool:
        """Return ``True`` when any output was retained."""

        return bool(self.stdout or self.stderr)


ContextValue = str | Sequence[str]


__all__ = [
    "ActionDefinition",
    "ActionGroup",
    "ActionInputs",
    "ActionInvocation",
    "ActionResult",
    "ActionStatus",
    "ContextValue",
    "InputKind",
    "InputProvenance",
    "InputSet",
    "NotApplicable",
    "ShowOutput",
]
