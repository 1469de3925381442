"""Tests for positional path helpers."""

import pytest

from edgefav.core.models import Folder, Link
from edgefav.core.paths import (
    adjust_path_after_removal, format_path, is_descendant, parse_path,
    paths_equal, resolve, resolve_parent
)


def sample_items():
    return [
        Folder("Work", [
            Link("Mail", "https://mail.example"),
            Folder("Docs", [Link("Wiki", "https://wiki.example")]),
        ]),
        Link("News", "https://news.example"),
    ]


def test_resolve_walks_children():
    items = sample_items()
    assert resolve(items, [0]).name == "Work"
    assert resolve(items, [0, 1, 0]).name == "Wiki"
    assert resolve(items, [1]).url == "https://news.example"


def test_resolve_returns_none_for_bad_paths():
    items = sample_items()
    assert resolve(items, []) is None
    assert resolve(items, [5]) is None
    assert resolve(items, [0, 9]) is None
    assert resolve(items, [-1]) is None
    # A link has no children to descend into
    assert resolve(items, [1, 0]) is None
    assert resolve(items, [0, 0, 0]) is None


def test_resolve_parent_top_level_uses_forest():
    items = sample_items()
    container, index = resolve_parent(items, [1])
    assert container is items
    assert index == 1


def test_resolve_parent_nested_uses_folder_children():
    items = sample_items()
    container, index = resolve_parent(items, [0, 1, 3])
    assert container is items[0].children[1].children
    assert index == 3


def test_resolve_parent_requires_folder_prefix():
    items = sample_items()
    assert resolve_parent(items, [1, 0]) is None
    assert resolve_parent(items, [7, 0]) is None
    assert resolve_parent(items, []) is None


def test_paths_equal():
    assert paths_equal([0, 1], [0, 1])
    assert not paths_equal([0, 1], [0])
    assert not paths_equal([0, 1], [0, 2])
    assert paths_equal([], [])


@pytest.mark.parametrize("path", [[0], [3, 1], [0, 0, 0]])
def test_path_is_not_its_own_descendant(path):
    assert not is_descendant(path, path)


@pytest.mark.parametrize("path", [[0], [3, 1], [2, 0, 4]])
def test_child_path_is_descendant(path):
    assert is_descendant(path + [0], path)
    assert is_descendant(path + [7, 2], path)


def test_sibling_is_not_descendant():
    assert not is_descendant([0, 2], [0, 1])
    assert not is_descendant([1, 0], [0])
    assert not is_descendant([0], [0, 1])


def test_adjust_sibling_removed_before_target():
    assert adjust_path_after_removal([2], [0]) == [1]
    assert adjust_path_after_removal([0, 3], [0, 1]) == [0, 2]


def test_adjust_sibling_removed_after_target():
    assert adjust_path_after_removal([0, 1], [0, 3]) == [0, 1]


def test_adjust_ignores_other_parents_and_depths():
    assert adjust_path_after_removal([1, 2], [0, 1]) == [1, 2]
    assert adjust_path_after_removal([2, 1], [0]) == [2, 1]
    assert adjust_path_after_removal([2], [0, 1]) == [2]


def test_adjust_returns_copy():
    target = [3]
    adjusted = adjust_path_after_removal(target, [1])
    assert adjusted == [2]
    assert target == [3]


def test_format_and_parse_path():
    assert format_path([0, 2, 1]) == "0.2.1"
    assert parse_path(" 0.2.1 ") == [0, 2, 1]
    assert parse_path("4") == [4]


@pytest.mark.parametrize("text", ["", "a", "0..1", "-1", "1.x"])
def test_parse_path_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_path(text)
