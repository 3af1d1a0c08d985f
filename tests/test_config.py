# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for layered configuration loading and catalog merging."""

from __future__ import annotations

from pathlib import Path

import pytest

from beautytips.catalog import ActionCatalog, ConfigLayer
from beautytips.config import (
    ActionConfigStore,
    BuiltinConfigSource,
    MappingConfigSource,
    TomlConfigSource,
    builtin_sources,
    default_user_config_path,
    load_catalog,
    parse_layer,
)
from beautytips.errors import ConfigError

from .helpers import make_action


def _document(*actions: dict[str, object], groups: list[dict[str, object]] | None = None) -> dict[str, object]:
    document: dict[str, object] = {"actions": list(actions)}
    if groups is not None:
        document["action-groups"] = groups
    return document


def test_builtin_catalog_loads_every_packaged_document() -> None:
    catalog = load_catalog(builtin_sources())

    assert "builtin/check_bom" in catalog
    assert "ruff/check_lint" in catalog
    assert "rust/check_fmt" in catalog
    assert {catalog.origin(name) for name in catalog} == {"builtin"}
    assert catalog["builtin/fix_bom"].run_sequentially is True
    assert "ruff" in catalog.groups


def test_builtin_source_reports_document_name() -> None:
    source = BuiltinConfigSource("ruff.toml")

    assert source.name == "builtin"
    assert "ruff.toml" in source.describe()
    assert source.load()["actions"]


def test_later_layer_replaces_whole_record() -> None:
    builtin = MappingConfigSource(
        _document(
            {"name": "x/a", "command": "one", "description": "first", "inputs": {"files": ["**/*.py"]}},
            {"name": "x/b", "command": "two"},
        ),
        name="builtin",
    )
    user = MappingConfigSource(_document({"name": "x/a", "command": "user-one"}), name="user")
    repo = MappingConfigSource(_document({"name": "x/c", "command": "three"}), name="repo")

    catalog = load_catalog([builtin], user=user, repo=repo)

    assert list(catalog) == ["x/a", "x/b", "x/c"]
    assert catalog["x/a"].command == "user-one"
    assert catalog["x/a"].description == ""
    assert catalog["x/a"].inputs.files == ()
    assert catalog.origin("x/a") == "user"
    assert catalog.origin("x/b") == "builtin"
    assert catalog.origin("x/c") == "repo"


def test_repo_layer_wins_over_user_layer() -> None:
    user = MappingConfigSource(_document({"name": "x/a", "command": "user"}), name="user")
    repo = MappingConfigSource(_document({"name": "x/a", "command": "repo"}), name="repo")

    catalog = load_catalog([], user=user, repo=repo)

    assert catalog["x/a"].command == "repo"
    assert catalog.origin("x/a") == "repo"


def test_duplicate_within_one_document_is_an_error() -> None:
    source = MappingConfigSource(
        _document({"name": "x/a", "command": "one"}, {"name": "x/a", "command": "two"}),
        name="repo",
    )

    with pytest.raises(ConfigError, match="more than once") as excinfo:
        parse_layer(source)
    assert excinfo.value.record == "actions[1] (x/a)"


def test_invalid_record_names_the_source_and_record() -> None:
    source = MappingConfigSource(_document({"name": "bad", "command": "one"}), name="repo")

    with pytest.raises(ConfigError) as excinfo:
        parse_layer(source)

    message = str(excinfo.value)
    assert message.startswith("repo configuration: actions[0] (bad): ")
    assert "exactly one '/'" in message


def test_unknown_top_level_key_is_rejected() -> None:
    source = MappingConfigSource({"tools": []}, name="repo")

    with pytest.raises(ConfigError, match="unknown top-level key"):
        parse_layer(source)


def test_actions_must_be_an_array_of_tables() -> None:
    with pytest.raises(ConfigError, match="array of tables"):
        parse_layer(MappingConfigSource({"actions": {"name": "x/a"}}, name="repo"))
    with pytest.raises(ConfigError, match="must be a table"):
        parse_layer(MappingConfigSource({"actions": ["x/a"]}, name="repo"))


def test_missing_toml_file_is_an_empty_layer(tmp_path: Path) -> None:
    source = TomlConfigSource(tmp_path / "absent.toml", name="repo")

    assert parse_layer(source) == ConfigLayer(name="repo")


def test_malformed_toml_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / ".beautytips.toml"
    path.write_text("[[actions]\nname = ", encoding="utf-8")

    with pytest.raises(ConfigError, match="invalid TOML"):
        TomlConfigSource(path, name="repo").load()


def test_store_reads_repo_document_from_root(tmp_path: Path) -> None:
    (tmp_path / ".beautytips.toml").write_text(
        '[[actions]]\nname = "builtin/check_bom"\ncommand = "echo overridden"\n',
        encoding="utf-8",
    )

    store = ActionConfigStore.for_root(tmp_path)
    catalog = store.load()

    assert catalog["builtin/check_bom"].command == "echo overridden"
    assert catalog.origin("builtin/check_bom") == "repo"
    assert [source.name for source in store.sources][-2:] == ["user", "repo"]


def test_store_without_builtins(tmp_path: Path) -> None:
    store = ActionConfigStore.for_root(tmp_path, include_builtin=False)

    assert len(store.load()) == 0


def test_user_config_follows_xdg_config_home(tmp_path: Path) -> None:
    path = default_user_config_path({"XDG_CONFIG_HOME": str(tmp_path)})

    assert path == tmp_path / "beautytips" / "config.toml"


def test_user_config_is_loaded_from_xdg_location(isolated_user_config: Path, tmp_path: Path) -> None:
    user_file = isolated_user_config / "beautytips" / "config.toml"
    user_file.parent.mkdir(parents=True)
    user_file.write_text('[[actions]]\nname = "mine/hello"\ncommand = "echo hi"\n', encoding="utf-8")

    catalog = ActionConfigStore.for_root(tmp_path).load()

    assert catalog.origin("mine/hello") == "user"


def test_groups_merge_by_name() -> None:
    builtin = MappingConfigSource(
        _document({"name": "x/a", "command": "a"}, groups=[{"name": "fast", "actions": ["x/a"]}]),
        name="builtin",
    )
    repo = MappingConfigSource(_document(groups=[{"name": "fast", "actions": ["x/all"]}]), name="repo")

    catalog = load_catalog([builtin], repo=repo)

    assert catalog.groups["fast"].actions == ("x/all",)


def test_catalog_is_read_only() -> None:
    catalog = ActionCatalog({"x/a": make_action("x/a")}, origins={"x/a": "repo"})

    with pytest.raises(TypeError):
        catalog["x/b"] = make_action("x/b")  # type: ignore[index]
    assert catalog.definitions() == (catalog["x/a"],)
