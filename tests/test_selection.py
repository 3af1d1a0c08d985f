# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for selector patterns and action groups."""

from __future__ import annotations

import logging

import pytest

from beautytips.catalog import ActionCatalog
from beautytips.models import ActionGroup
from beautytips.selection import select

from .helpers import make_action

NAMES = (
    "ruff/check_format",
    "ruff/fix_format",
    "ruff/check_lint",
    "rust/check_fmt",
    "rust/fix_fmt",
    "builtin/check_bom",
)


@pytest.fixture
def catalog() -> ActionCatalog:
    groups = {
        "checks": ActionGroup(name="checks", actions=("check_all",)),
        "nested": ActionGroup(name="nested", actions=("checks", "rust/fix_fmt", "nested")),
    }
    return ActionCatalog({name: make_action(name) for name in NAMES}, groups=groups)


def _names(catalog: ActionCatalog, *filters: str) -> list[str]:
    return [action.name for action in select(catalog, filters)]


def test_exact_name(catalog: ActionCatalog) -> None:
    assert _names(catalog, "rust/fix_fmt") == ["rust/fix_fmt"]


def test_namespace_all(catalog: ActionCatalog) -> None:
    assert _names(catalog, "ruff/all") == ["ruff/check_format", "ruff/fix_format", "ruff/check_lint"]


def test_namespace_prefix_all(catalog: ActionCatalog) -> None:
    assert _names(catalog, "ruff/check_all") == ["ruff/check_format", "ruff/check_lint"]


def test_bare_prefix_all_spans_namespaces(catalog: ActionCatalog) -> None:
    assert _names(catalog, "fix_all") == ["ruff/fix_format", "rust/fix_fmt"]


def test_bare_all_selects_everything(catalog: ActionCatalog) -> None:
    assert _names(catalog, "all") == list(NAMES)


def test_result_follows_catalog_order_without_duplicates(catalog: ActionCatalog) -> None:
    assert _names(catalog, "builtin/check_bom", "check_all", "ruff/check_lint") == [
        "ruff/check_format",
        "ruff/check_lint",
        "rust/check_fmt",
        "builtin/check_bom",
    ]


def test_groups_expand_recursively_and_tolerate_cycles(catalog: ActionCatalog) -> None:
    assert _names(catalog, "nested") == [
        "ruff/check_format",
        "ruff/check_lint",
        "rust/check_fmt",
        "rust/fix_fmt",
        "builtin/check_bom",
    ]


def test_unmatched_filters_select_nothing(catalog: ActionCatalog, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="beautytips.selection"):
        assert _names(catalog, "nope/missing", "zzz_all") == []
    assert "nope/missing" in caplog.text


def test_empty_filters_select_nothing(catalog: ActionCatalog) -> None:
    assert _names(catalog) == []
    assert _names(catalog, " ") == []


def test_prefix_requires_word_boundary() -> None:
    catalog = ActionCatalog({name: make_action(name) for name in ("x/checker", "x/check_a")})

    assert _names(catalog, "x/check_all") == ["x/check_a"]
