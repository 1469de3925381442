"""Tests for the export array and loading it back into a tree."""

import json

from edgefav.core.export_model import LINKS_FOLDER_NAME, build_export_model, export_model_json, load_export_model
from edgefav.core.models import DEFAULT_ROOT_LABEL, FavoritesTree, Folder, Link


def test_folder_with_link():
    tree = FavoritesTree("MyFavs", [Folder("Work", [Link("Mail", "https://mail.example")])])
    assert build_export_model(tree) == [
        {"toplevel_name": "MyFavs"},
        {"name": "Work", "children": [{"name": "Mail", "url": "https://mail.example"}]},
    ]


def test_standalone_links_collected_into_links_folder():
    tree = FavoritesTree("MyFavs", [Link("Docs", "https://docs.example")])
    assert build_export_model(tree) == [
        {"toplevel_name": "MyFavs"},
        {"name": LINKS_FOLDER_NAME, "children": [{"name": "Docs", "url": "https://docs.example"}]},
    ]


def test_links_folder_trails_top_level_folders():
    tree = FavoritesTree("Favs", [
        Link("One", "https://1.example"),
        Folder("A"),
        Link("Two", "https://2.example"),
        Folder("B"),
    ])
    model = build_export_model(tree)
    assert [entry.get("name") for entry in model[1:]] == ["A", "B", "Links"]
    assert [child["name"] for child in model[-1]["children"]] == ["One", "Two"]


def test_empty_folder_keeps_children_key():
    tree = FavoritesTree("Favs", [Folder("Empty", [Folder("Inner")])])
    model = build_export_model(tree)
    assert model[1] == {"name": "Empty", "children": [{"name": "Inner", "children": []}]}


def test_empty_tree_has_only_toplevel_name():
    assert build_export_model(FavoritesTree()) == [{"toplevel_name": DEFAULT_ROOT_LABEL}]


def test_export_model_json_is_pretty():
    tree = FavoritesTree("Favs", [Folder("Café")])
    text = export_model_json(tree)
    assert "\n  {" in text
    assert "Café" in text
    assert json.loads(text) == build_export_model(tree)


def test_load_builds_folders_and_links():
    tree = load_export_model([
        {"toplevel_name": "Corp"},
        {"name": "Work", "children": [
            {"name": "Mail", "url": "https://mail.example"},
            {"name": "Sub", "children": []},
        ]},
    ])
    assert tree == FavoritesTree("Corp", [
        Folder("Work", [Link("Mail", "https://mail.example"), Folder("Sub", [])]),
    ])


def test_load_last_toplevel_name_wins():
    tree = load_export_model([{"toplevel_name": "First"}, {"name": "A", "children": []}, {"toplevel_name": "Second"}])
    assert tree.root_label == "Second"
    assert [node.name for node in tree.items] == ["A"]


def test_load_without_toplevel_name_uses_default():
    tree = load_export_model([{"name": "A", "children": []}])
    assert tree.root_label == DEFAULT_ROOT_LABEL


def test_load_skips_unrecognised_entries():
    tree = load_export_model([
        "stray",
        42,
        {"url": "https://nameless.example"},
        {"name": ""},
        {"name": "Kept", "children": ["junk", {"name": "L", "url": "https://l.example"}]},
    ])
    assert tree.items == [Folder("Kept", [Link("L", "https://l.example")])]


def test_load_tolerates_missing_fields():
    tree = load_export_model([
        {"name": "NoChildren"},
        {"name": "BadChildren", "children": "oops"},
        {"name": "F", "children": [{"name": "NoUrl"}, {"url": "https://x.example"}]},
    ])
    assert tree.items[0] == Folder("NoChildren", [])
    assert tree.items[1] == Folder("BadChildren", [])
    assert tree.items[2].children == [Link("NoUrl", ""), Link("", "https://x.example")]


def test_build_then_load_round_trip():
    tree = FavoritesTree("Favs", [
        Folder("Work", [Folder("Deep", [Link("D", "https://d.example")]), Link("W", "https://w.example")]),
        Link("Loose", "https://loose.example"),
    ])
    model = build_export_model(tree)
    assert build_export_model(load_export_model(model)) == model
