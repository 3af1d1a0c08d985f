# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Concrete configuration sources (packaged builtins, TOML files, mappings)."""

from __future__ import annotations

import tomllib
from abc import abstractmethod
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any, Final, Protocol, runtime_checkable

from ..errors import ConfigError

BUILTIN_PACKAGE: Final[str] = "beautytips.config"
BUILTIN_DATA_DIR: Final[str] = "data"

BUILTIN_LAYER: Final[str] = "builtin"
USER_LAYER: Final[str] = "user"
REPO_LAYER: Final[str] = "repo"


@runtime_checkable
class ConfigSource(Protocol):
    """Provide an action document loaded from disk or other mediums."""

    name: str
    """Layer identifier recorded as the origin of the actions it supplies."""

    @abstractmethod
    def load(self) -> Mapping[str, Any]:
        """Return the parsed document, or an empty mapping when absent.

        Returns:
            Mapping[str, Any]: Raw document contents.
        """

    @abstractmethod
    def describe(self) -> str:
        """Return a human-readable description of the source.

        Returns:
            str: Description used in error messages.
        """


class TomlConfigSource(ConfigSource):
    """Load an action document from a TOML file; a missing file is empty."""

    def __init__(self, path: Path, *, name: str) -> None:
        """Create a source reading ``path``.

        Args:
            path: TOML document to load.
            name: Layer identifier recorded as the origin of its actions.
        """

        self.path = path
        self.name = name

    def load(self) -> Mapping[str, Any]:
        """Return the parsed TOML document.

        Returns:
            Mapping[str, Any]: Document contents, empty when the file is absent.

        Raises:
            ConfigError: If the file cannot be read or is not valid TOML.
        """

        if not self.path.is_file():
            return {}
        try:
            with self.path.open("rb") as handle:
                return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML: {exc}", source=self.describe()) from exc
        except OSError as exc:
            raise ConfigError(f"cannot read file: {exc}", source=self.describe()) from exc

    def describe(self) -> str:
        """Return the layer name and file path for error messages."""

        return f"{self.name} configuration at {self.path}"


class BuiltinConfigSource(ConfigSource):
    """Load one of the action documents shipped with the package."""

    name = BUILTIN_LAYER

    def __init__(self, document: str) -> None:
        """Create a source for the packaged ``document``.

        Args:
            document: File name under the package's ``data`` directory.
        """

        self.document = document

    def load(self) -> Mapping[str, Any]:
        """Return the parsed packaged document.

        Returns:
            Mapping[str, Any]: Document contents.

        Raises:
            ConfigError: If the packaged document is not valid TOML.
        """

        resource = resources.files(BUILTIN_PACKAGE).joinpath(BUILTIN_DATA_DIR).joinpath(self.document)
        try:
            return tomllib.loads(resource.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML: {exc}", source=self.describe()) from exc

    def describe(self) -> str:
        """Return the packaged document name for error messages."""

        return f"builtin configuration {self.document}"


class MappingConfigSource(ConfigSource):
    """Serve an in-memory document, typically assembled by a caller."""

    def __init__(self, data: Mapping[str, Any], *, name: str) -> None:
        """Create a source serving ``data``.

        Args:
            data: Document shaped like a parsed TOML file.
            name: Layer identifier recorded as the origin of its actions.
        """

        self._data = data
        self.name = name

    def load(self) -> Mapping[str, Any]:
        """Return the in-memory document unchanged."""

        return self._data

    def describe(self) -> str:
        """Return the layer name for error messages."""

        return f"{self.name} configuration"


__all__ = [
    "BUILTIN_LAYER",
    "BuiltinConfigSource",
    "ConfigSource",
    "MappingConfigSource",
    "REPO_LAYER",
    "TomlConfigSource",
    "USER_LAYER",
]
