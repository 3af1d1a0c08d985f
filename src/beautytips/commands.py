# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expand action command templates into executable command lines.

Templates are split into shell words when the action is loaded. Markers of
the form ``{{name}}`` or ``{{name...}}`` are then substituted per word:

* ``files...`` expands to the invocation's files. A word that is only the
  marker becomes one argument per file; an embedded marker becomes the
  shell-quoted files joined by spaces.
* ``files`` and ``file`` without ``...`` run the command once per file.
* Any other name is looked up in the :class:`TemplateContext`. Sequence
  values used with ``...`` expand like ``files...``. Sequence values used
  without ``...`` run the command once per value.
* A leading ``{BEAUTY_TIPS}`` word re-invokes this package.

Marker names must be identifiers. Any other ``{{...}}`` text, or a stray
``{{`` or ``}}``, is rejected.
"""

from __future__ import annotations

import itertools
import os
import re
import shlex
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .constants import FILE_MARKER, FILES_MARKER, SELF_TOKEN
from .context import TemplateContext
from .errors import TemplateError
from .models import ActionDefinition, ActionInvocation, ContextValue, InputProvenance

_MARKER_RE: Final[re.Pattern[str]] = re.compile(r"\{\{(.*?)(\.\.\.)?\}\}")
_NAME_RE: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_FILE_MARKERS: Final[frozenset[str]] = frozenset({FILES_MARKER, FILE_MARKER})


@dataclass(frozen=True, slots=True)
class BuiltCommand:
    """Executable command line with its environment and working directory."""

    argv: tuple[str, ...]
    env: Mapping[str, str]
    cwd: Path

    def display(self) -> str:
        """Return a shell-quoted rendering of ``argv`` for logs."""

        return shlex.join(self.argv)


def self_invocation() -> list[str]:
    """Return the argv prefix that runs this package with the current interpreter."""

    return [sys.executable, "-m", "beautytips"]


def build_environment(
    action: ActionDefinition,
    provenance: InputProvenance,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return the child environment for ``action``.

    The base environment comes first, then the provenance variables, then the
    action's declared entries.

    Args:
        action: Action whose ``environment`` entries are applied.
        provenance: Provenance of the run's input set.
        base_env: Starting environment; defaults to ``os.environ``.

    Returns:
        dict[str, str]: Complete environment mapping.
    """

    env = dict(os.environ if base_env is None else base_env)
    env.update(provenance.environment())
    env.update(action.environment_items())
    return env


def _as_values(value: ContextValue) -> tuple[str, ...]:
    """Return a context value as a tuple of argument strings."""

    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)


def _markers(action_name: str, token: str) -> list[tuple[str, bool]]:
    """Return the markers used in ``token``.

    Args:
        action_name: Action named in any error raised.
        token: One shell word of the command template.

    Returns:
        list[tuple[str, bool]]: ``(name, spread)`` pairs in order of appearance.

    Raises:
        TemplateError: If a marker name is not an identifier or the word holds
            an unmatched ``{{`` or ``}}``.
    """

    found: list[tuple[str, bool]] = []
    for match in _MARKER_RE.finditer(token):
        name = match.group(1)
        if _NAME_RE.fullmatch(name) is None:
            raise TemplateError(action_name, match.group(0), reason="marker names must be identifiers")
        found.append((name, bool(match.group(2))))
    remainder = _MARKER_RE.sub("", token)
    if "{{" in remainder or "}}" in remainder:
        raise TemplateError(action_name, token, reason="unmatched '{{' or '}}'")
    return found


def _substitute(token: str, values: Mapping[str, tuple[str, ...]]) -> list[str]:
    """Expand the markers of one template word.

    Args:
        token: Template word.
        values: Resolved values for every marker in the template.

    Returns:
        list[str]: One argument per value when the word is only a marker,
        otherwise the single word with shell-quoted values spliced in.
    """

    whole = _MARKER_RE.fullmatch(token)
    if whole is not None:
        return list(values[whole.group(1)])
    return [_MARKER_RE.sub(lambda match: " ".join(shlex.quote(item) for item in values[match.group(1)]), token)]


def build_commands(
    invocation: ActionInvocation,
    context: TemplateContext | None = None,
    *,
    base_env: Mapping[str, str] | None = None,
) -> list[BuiltCommand]:
    """Expand ``invocation``'s command template.

    Args:
        invocation: Action paired with its filtered files.
        context: Source of named marker values; defaults to computed values only.
        base_env: Starting environment; defaults to ``os.environ``.

    Returns:
        list[BuiltCommand]: One command, or one per combination of the values
        of iterated markers (``{{file}}``, ``{{files}}`` and multi-valued
        context markers used without ``...``). Empty when such a marker has no
        values.

    Raises:
        TemplateError: If the template holds a malformed or unknown marker, or
            a context provider fails.
    """

    action = invocation.action
    resolver = context or TemplateContext()
    input_set = invocation.input_set
    tokens = action.command_tokens()
    if tokens[0] == SELF_TOKEN:
        tokens = [*self_invocation(), *tokens[1:]]

    fixed: dict[str, tuple[str, ...]] = {}
    iterated: dict[str, tuple[str, ...]] = {}
    for token in tokens:
        for name, spread in _markers(action.name, token):
            if name in fixed or name in iterated:
                continue
            if name in _FILE_MARKERS:
                files = tuple(input_set.relative(path) for path in invocation.files)
                if spread:
                    fixed[name] = files
                else:
                    iterated[name] = files
                continue
            value = resolver.lookup(name, invocation)
            if value is None:
                raise TemplateError(action.name, name)
            if spread or isinstance(value, str):
                fixed[name] = _as_values(value)
            else:
                iterated[name] = _as_values(value)

    env = build_environment(action, input_set.provenance, base_env)
    commands: list[BuiltCommand] = []
    names = list(iterated)
    for combination in itertools.product(*(iterated[name] for name in names)):
        values = dict(fixed)
        values.update({name: (item,) for name, item in zip(names, combination, strict=True)})
        argv: list[str] = []
        for token in tokens:
            argv.extend(_substitute(token, values))
        commands.append(BuiltCommand(argv=tuple(argv), env=env, cwd=input_set.root))
    return commands


__all__ = ["BuiltCommand", "build_commands", "build_environment", "self_invocation"]
