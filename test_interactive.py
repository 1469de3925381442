"""Tests for the interactive editor session."""

import json

import pytest

from edgefav.backup.export_manager import ExportManager
from edgefav.core.errors import FormatError, PartialMoveError, ValidationError
from edgefav.core.models import FavoritesTree, Folder, Link
from edgefav.core.mover import MoveMode
from edgefav.formats.windows import WindowsCodec
from edgefav.ui.interactive import EditorSession, MENU, format_outline, run_editor


@pytest.fixture
def session(tmp_path):
    return EditorSession(export_manager=ExportManager(tmp_path / "exports"))


def feed_input(monkeypatch, answers):
    answers = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))


def test_outline_of_empty_tree():
    assert format_outline(FavoritesTree("Favs")) == "📚 Favs\n  (no folders or links added yet)"


def test_outline_lists_paths():
    tree = FavoritesTree("Favs", [Folder("Work", [Link("Mail", "https://mail.example")])])
    assert format_outline(tree).splitlines() == [
        "📚 Favs",
        "  [0] 📁 Work",
        "    [0.0] 🔗 Mail <https://mail.example>",
    ]


def test_root_label_from_config(tmp_path):
    session = EditorSession({"root_label": "Corp"}, ExportManager(tmp_path))
    assert session.store.root_label == "Corp"


def test_json_output_follows_store(session):
    session.add_folder("Work")
    session.add_link("Mail", "https://mail.example", [0])
    assert json.loads(session.json_output)[1] == {
        "name": "Work", "children": [{"name": "Mail", "url": "https://mail.example"}]
    }


def test_add_rejects_blank_input(session):
    with pytest.raises(ValidationError):
        session.add_folder("  ")
    with pytest.raises(ValidationError):
        session.add_link("Mail", "")
    assert session.store.items == []


def test_partial_move_puts_node_back_at_top_level(session):
    session.add_folder("A")
    session.add_folder("B")
    session.add_link("c", "https://c.example")
    with pytest.raises(PartialMoveError):
        session.move([0], [2], MoveMode.INTO_FOLDER)
    assert [node.name for node in session.store.items] == ["B", "c", "A"]


def test_export_and_import(session, tmp_path):
    session.add_folder("Work")
    session.store.root_label = "Corp"
    path = session.export("windows")
    assert path.exists()

    other = EditorSession(export_manager=ExportManager(tmp_path / "other"))
    other.import_file(path)
    assert other.store.root_label == "Corp"
    assert other.store.items == [Folder("Work", [])]


def test_failed_import_keeps_tree(session, tmp_path):
    session.add_folder("Keep")
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"settings": [{}]}), encoding="utf-8")
    with pytest.raises(FormatError):
        session.import_file(bad)
    assert session.store.items == [Folder("Keep", [])]


def test_run_editor_adds_and_moves(session, monkeypatch, capsys):
    quit_choice = str(MENU.index("Quit") + 1)
    feed_input(monkeypatch, [
        "2", "Work", "n",
        "3", "Mail", "https://mail.example", "n",
        # Move the link into the folder
        "6", "1", "0", "2",
        "1",
        quit_choice,
    ])
    run_editor(session)
    assert session.store.items == [Folder("Work", [Link("Mail", "https://mail.example")])]
    assert "Moved to 0.0" in capsys.readouterr().out


def test_run_editor_reports_errors_and_continues(session, monkeypatch, capsys):
    quit_choice = str(MENU.index("Quit") + 1)
    feed_input(monkeypatch, [
        "6", "0", "0", "1",   # move onto itself
        quit_choice,
    ])
    session.add_folder("Only")
    run_editor(session)
    assert "✗" in capsys.readouterr().out
    assert session.store.items == [Folder("Only", [])]


def test_import_through_menu(session, monkeypatch, tmp_path):
    policy = tmp_path / "policy.json"
    policy.write_text(WindowsCodec().export_document(FavoritesTree("Imported", [Folder("F")])), encoding="utf-8")
    quit_choice = str(MENU.index("Quit") + 1)
    feed_input(monkeypatch, ["9", str(policy), quit_choice])
    run_editor(session)
    assert session.store.root_label == "Imported"
    assert session.store.items == [Folder("F", [])]


def test_binary_import_keeps_session_alive(session, monkeypatch, tmp_path, capsys):
    binary = tmp_path / "signed.mobileconfig"
    binary.write_bytes(b"0\x82\x1a\x05\x06\t*\x86H\x86\xf7")
    session.add_folder("Unsaved work")
    quit_choice = str(MENU.index("Quit") + 1)
    feed_input(monkeypatch, ["9", str(binary), "y", quit_choice])
    run_editor(session)
    assert "not a UTF-8 text document" in capsys.readouterr().out
    assert session.store.items == [Folder("Unsaved work", [])]
