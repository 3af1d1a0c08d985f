# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Factories shared by the test modules."""

from __future__ import annotations

import shlex
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from beautytips.models import ActionDefinition, InputKind, InputProvenance, InputSet
from beautytips.vcs import CommandOutput


def make_action(name: str = "test/action", command: str = "true", **fields: Any) -> ActionDefinition:
    """Build an action definition using the document field names."""

    return ActionDefinition.model_validate({"name": name, "command": command, **fields})


def make_input_set(root: Path, files: Iterable[str], kind: InputKind = InputKind.DIR) -> InputSet:
    """Create the files below ``root`` and return an input set listing them."""

    paths = []
    for relative in files:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if not path.exists():
            path.write_text("content\n", encoding="utf-8")
        paths.append(path.resolve())
    return InputSet(root=root.resolve(), files=tuple(sorted(paths)), provenance=InputProvenance(kind=kind))


def python_command(code: str, *args: str) -> str:
    """Return a command template running ``code`` with the current interpreter."""

    return shlex.join([sys.executable, "-c", code, *args])


class FakeRunner:
    """Record VCS commands and answer them from a table keyed by subcommand."""

    def __init__(self, responses: dict[tuple[str, ...], CommandOutput]) -> None:
        self.responses = responses
        self.calls: list[tuple[tuple[str, ...], Path]] = []

    def __call__(self, cmd: Sequence[str], cwd: Path) -> CommandOutput:
        self.calls.append((tuple(cmd), cwd))
        for prefix, output in self.responses.items():
            if tuple(cmd[: len(prefix)]) == prefix:
                return output
        return CommandOutput(returncode=127, stderr="not found")
