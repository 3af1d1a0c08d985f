# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Action configuration sources and the layered config store."""

from __future__ import annotations

from .sources import (
    BUILTIN_LAYER,
    REPO_LAYER,
    USER_LAYER,
    BuiltinConfigSource,
    ConfigSource,
    MappingConfigSource,
    TomlConfigSource,
)
from .store import ActionConfigStore, builtin_sources, default_user_config_path, load_catalog, parse_layer

__all__ = [
    "ActionConfigStore",
    "BUILTIN_LAYER",
    "BuiltinConfigSource",
    "ConfigSource",
    "MappingConfigSource",
    "REPO_LAYER",
    "TomlConfigSource",
    "USER_LAYER",
    "builtin_sources",
    "default_user_config_path",
    "load_catalog",
    "parse_layer",
]
