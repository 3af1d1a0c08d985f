# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered loading of action documents into an :class:`ActionCatalog`."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final, TypeVar

from pydantic import BaseModel, ValidationError

from ..catalog import ActionCatalog, ConfigLayer
from ..constants import BUILTIN_DOCUMENTS, REPO_CONFIG_FILENAME, USER_CONFIG_DIRNAME, USER_CONFIG_FILENAME
from ..errors import ConfigError
from ..models import ActionDefinition, ActionGroup
from .sources import REPO_LAYER, USER_LAYER, BuiltinConfigSource, ConfigSource, TomlConfigSource

LOGGER = logging.getLogger(__name__)

ACTIONS_KEY: Final[str] = "actions"
GROUPS_KEY: Final[str] = "action-groups"
_DOCUMENT_KEYS: Final[frozenset[str]] = frozenset({ACTIONS_KEY, GROUPS_KEY})

ModelT = TypeVar("ModelT", bound=BaseModel)


def default_user_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Return the user-level configuration path.

    Args:
        env: Environment used to resolve ``XDG_CONFIG_HOME``.

    Returns:
        Path: ``$XDG_CONFIG_HOME/beautytips/config.toml`` or the ``~/.config`` fallback.
    """

    environ = os.environ if env is None else env
    base = environ.get("XDG_CONFIG_HOME")
    config_home = Path(base) if base else Path.home() / ".config"
    return config_home / USER_CONFIG_DIRNAME / USER_CONFIG_FILENAME


def builtin_sources() -> list[ConfigSource]:
    """Return sources for every packaged action document in load order."""

    return [BuiltinConfigSource(document) for document in BUILTIN_DOCUMENTS]


def parse_layer(source: ConfigSource) -> ConfigLayer:
    """Validate the document served by ``source``.

    Args:
        source: Configuration source to load.

    Returns:
        ConfigLayer: Validated action and group records.

    Raises:
        ConfigError: If the document or any record is malformed.
    """

    document = source.load()
    where = source.describe()
    unknown = sorted(set(document) - _DOCUMENT_KEYS)
    if unknown:
        raise ConfigError(f"unknown top-level key(s): {', '.join(unknown)}", source=where)
    actions = _parse_records(document.get(ACTIONS_KEY), ActionDefinition, key=ACTIONS_KEY, where=where)
    groups = _parse_records(document.get(GROUPS_KEY), ActionGroup, key=GROUPS_KEY, where=where)
    LOGGER.debug("Loaded %d action(s) and %d group(s) from %s", len(actions), len(groups), where)
    return ConfigLayer(name=source.name, actions=tuple(actions), groups=tuple(groups))


def _parse_records(
    raw: Any,
    model: type[ModelT],
    *,
    key: str,
    where: str,
) -> list[ModelT]:
    """Validate the array stored under ``key`` into ``model`` instances.

    Args:
        raw: Value found under ``key`` in the document, if any.
        model: Pydantic model each record is validated against.
        key: Document key, used in record labels.
        where: Source description for error messages.

    Returns:
        list[ModelT]: Validated records in document order.

    Raises:
        ConfigError: If the value is not an array of tables, a record fails
            validation or a name repeats within the document.
    """

    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError(f"'{key}' must be an array of tables", source=where)
    records: list[ModelT] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw):
        label = _record_label(key, index, entry)
        if not isinstance(entry, Mapping):
            raise ConfigError("record must be a table", source=where, record=label)
        try:
            record = model.model_validate(entry)
        except ValidationError as exc:
            raise ConfigError(_summarise_validation(exc), source=where, record=label) from exc
        name = getattr(record, "name")
        if name in seen:
            raise ConfigError(f"'{name}' is defined more than once", source=where, record=label)
        seen.add(name)
        records.append(record)
    return records


def _record_label(key: str, index: int, entry: Any) -> str:
    name = entry.get("name") if isinstance(entry, Mapping) else None
    if isinstance(name, str) and name:
        return f"{key}[{index}] ({name})"
    return f"{key}[{index}]"


def _summarise_validation(exc: ValidationError) -> str:
    """Return one ``location: message`` clause per validation error."""

    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "record"
        messages.append(f"{location}: {error['msg']}")
    return "; ".join(messages)


class ActionConfigStore:
    """Merge builtin, user and repository layers into one catalog."""

    def __init__(
        self,
        builtin: Sequence[ConfigSource],
        user: ConfigSource | None = None,
        repo: ConfigSource | None = None,
    ) -> None:
        """Create the store from its layers, lowest precedence first.

        Args:
            builtin: Packaged documents, merged in order.
            user: Optional user configuration layer.
            repo: Optional repository configuration layer.
        """

        self._builtin = tuple(builtin)
        self._user = user
        self._repo = repo

    @classmethod
    def for_root(
        cls,
        root: Path,
        *,
        user_config: Path | None = None,
        repo_config: Path | None = None,
        include_builtin: bool = True,
    ) -> ActionConfigStore:
        """Build a store using the default configuration locations.

        Args:
            root: Workspace root used to locate the repository document.
            user_config: Optional user-level override path.
            repo_config: Optional repository-level override path.
            include_builtin: Whether the packaged documents form the lowest layer.

        Returns:
            ActionConfigStore: Store configured with default precedence ordering.
        """

        user_path = user_config if user_config is not None else default_user_config_path()
        repo_path = repo_config if repo_config is not None else root / REPO_CONFIG_FILENAME
        return cls(
            builtin_sources() if include_builtin else [],
            user=TomlConfigSource(user_path, name=USER_LAYER),
            repo=TomlConfigSource(repo_path, name=REPO_LAYER),
        )

    @property
    def sources(self) -> tuple[ConfigSource, ...]:
        """Return every configured source in ascending precedence."""

        optional = tuple(source for source in (self._user, self._repo) if source is not None)
        return self._builtin + optional

    def load(self) -> ActionCatalog:
        """Return the merged, immutable catalog.

        Raises:
            ConfigError: If any layer contains a malformed record.
        """

        return ActionCatalog.from_layers(parse_layer(source) for source in self.sources)


def load_catalog(
    builtin: Sequence[ConfigSource],
    user: ConfigSource | None = None,
    repo: ConfigSource | None = None,
) -> ActionCatalog:
    """Merge the given layers into an :class:`ActionCatalog`.

    Args:
        builtin: Builtin sources, lowest precedence first.
        user: Optional user-level source.
        repo: Optional repository-level source.

    Returns:
        ActionCatalog: Merged catalog.
    """

    return ActionConfigStore(builtin, user=user, repo=repo).load()


__all__ = [
    "ACTIONS_KEY",
    "ActionConfigStore",
    "GROUPS_KEY",
    "builtin_sources",
    "default_user_config_path",
    "load_catalog",
    "parse_layer",
]
