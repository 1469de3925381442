"""PyQt6 desktop editor for managed favourites."""

import sys
from pathlib import Path
from typing import List, Optional
from PyQt6.QtWidgets import (
    QAbstractItemView, QApplication, QDialog, QDialogButtonBox, QFileDialog,
    QFormLayout, QHBoxLayout, QLabel, QLineEdit, QMainWindow, QMessageBox,
    QPushButton, QSplitter, QTextEdit, QTreeWidget, QTreeWidgetItem,
    QVBoxLayout, QWidget
)
from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QColor, QFont, QPalette

from edgefav.core.errors import FavoritesError, PartialMoveError
from edgefav.core.models import Folder, Node
from edgefav.core.mover import MoveMode
from edgefav.core.store import TreeStore
from edgefav.ui.interactive import EditorSession
from edgefav.ui.theme import THEME
from edgefav.utils.logger import setup_logger

logger = setup_logger()

PATH_ROLE = Qt.ItemDataRole.UserRole
IMPORT_FILTER = "Policy files (*.json *.mobileconfig *.plist *.xml);;All files (*)"


class FavoritesTreeWidget(QTreeWidget):
    """Tree view whose drops are turned into move requests instead of Qt moves."""

    move_requested = pyqtSignal(list, list, object)  # source path, dest path, MoveMode

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setHeaderLabels(["Name", "URL"])
        self.setColumnWidth(0, 280)
        self.setDragEnabled(True)
        self.setAcceptDrops(True)
        self.setDropIndicatorShown(True)
        self.setDragDropMode(QAbstractItemView.DragDropMode.InternalMove)

    def dropEvent(self, event):
        source_item = self.currentItem()
        target_item = self.itemAt(event.position().toPoint())
        event.ignore()
        if source_item is None or target_item is None:
            return

        source_path = source_item.data(0, PATH_ROLE)
        dest_path = target_item.data(0, PATH_ROLE)
        on_folder = (
            self.dropIndicatorPosition() == QAbstractItemView.DropIndicatorPosition.OnItem
            and target_item.data(1, PATH_ROLE) == "folder"
        )
        mode = MoveMode.INTO_FOLDER if on_folder else MoveMode.REORDER
        self.move_requested.emit(list(source_path), list(dest_path), mode)


class ItemDialog(QDialog):
    """Add/edit dialog for a folder or a link."""

    def __init__(self, title: str, is_folder: bool, node: Optional[Node] = None,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setMinimumWidth(420)
        layout = QFormLayout(self)

        self.name_edit = QLineEdit(node.name if node else "")
        layout.addRow("Folder name:" if is_folder else "Link name:", self.name_edit)

        self.url_edit: Optional[QLineEdit] = None
        if not is_folder:
            self.url_edit = QLineEdit(getattr(node, "url", "") if node else "")
            self.url_edit.setPlaceholderText("https://example.com")
            layout.addRow("URL:", self.url_edit)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    def values(self):
        url = self.url_edit.text() if self.url_edit is not None else None
        return self.name_edit.text(), url


class FavoritesEditorGUI(QMainWindow):
    """Main window: tree editor, export buttons and JSON preview."""

    def __init__(self, config: Optional[dict] = None):
        super().__init__()
        self.colors = THEME.copy()
        self.session = EditorSession(config)
        self.session.store.subscribe(self._on_tree_changed)
        self._init_ui()
        self._on_tree_changed(self.session.store)

    def _button_stylesheet(self, primary: bool = False) -> str:
        c = self.colors
        background = c['accent'] if primary else c['surface_alt']
        hover = c['accent_hover'] if primary else c['border']
        return f"""
            QPushButton {{
                background-color: {background};
                color: {c['text']};
                border: 1px solid {c['border']};
                border-radius: 6px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {hover};
            }}
        """

    def _add_button(self, layout: QHBoxLayout, text: str, handler, primary: bool = False) -> QPushButton:
        button = QPushButton(text)
        button.setStyleSheet(self._button_stylesheet(primary))
        button.clicked.connect(handler)
        layout.addWidget(button)
        return button

    def _init_ui(self):
        """Initialize the UI."""
        self.setWindowTitle("Edge Managed Favourites")
        self.setGeometry(100, 100, 1100, 750)
        colors = self.colors

        self.setStyleSheet(f"""
            QMainWindow, QWidget {{
                background-color: {colors['background']};
                color: {colors['text']};
            }}
            QLineEdit, QTreeWidget {{
                background-color: {colors['surface']};
                border: 1px solid {colors['border']};
                border-radius: 6px;
                padding: 4px;
            }}
        """)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)
        main_layout.setContentsMargins(16, 16, 16, 16)
        main_layout.setSpacing(10)

        title = QLabel("Edge Managed Favourites")
        title_font = QFont()
        title_font.setPointSize(20)
        title_font.setBold(True)
        title.setFont(title_font)
        title.setStyleSheet(f"color: {colors['accent']};")
        main_layout.addWidget(title)

        root_row = QHBoxLayout()
        root_row.addWidget(QLabel("Top-level folder:"))
        self.root_edit = QLineEdit(self.session.store.root_label)
        self.root_edit.editingFinished.connect(self._root_label_changed)
        root_row.addWidget(self.root_edit)
        main_layout.addLayout(root_row)

        edit_row = QHBoxLayout()
        self._add_button(edit_row, "Add Folder", self._add_folder, primary=True)
        self._add_button(edit_row, "Add Link", self._add_link, primary=True)
        self._add_button(edit_row, "Add Link to Folder", self._add_child_link)
        self._add_button(edit_row, "Add Subfolder", self._add_child_folder)
        self._add_button(edit_row, "Edit", self._edit_selected)
        self._add_button(edit_row, "Delete", self._delete_selected)
        edit_row.addStretch()
        main_layout.addLayout(edit_row)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        self.tree_widget = FavoritesTreeWidget()
        self.tree_widget.move_requested.connect(self._move_requested)
        self.tree_widget.itemDoubleClicked.connect(lambda *_: self._edit_selected())
        splitter.addWidget(self.tree_widget)

        self.json_preview = QTextEdit()
        self.json_preview.setReadOnly(True)
        self.json_preview.setFont(QFont("Monospace", 10))
        self.json_preview.setStyleSheet(f"background-color: {colors['preview_bg']};")
        splitter.addWidget(self.json_preview)
        splitter.setSizes([650, 450])
        main_layout.addWidget(splitter, 1)

        io_row = QHBoxLayout()
        self._add_button(io_row, "Import Windows / macOS…", self._import_file)
        self._add_button(io_row, "Export Windows (Intune)", lambda: self._export("windows"), primary=True)
        self._add_button(io_row, "Export macOS (.mobileconfig)", lambda: self._export("macos"), primary=True)
        self._add_button(io_row, "Copy JSON", self._copy_json)
        io_row.addStretch()
        main_layout.addLayout(io_row)

        self.status_label = QLabel("")
        main_layout.addWidget(self.status_label)
        self._status_timer = QTimer(self)
        self._status_timer.setSingleShot(True)
        self._status_timer.timeout.connect(lambda: self.status_label.setText(""))

    def _notify(self, message: str, level: str = "success"):
        """Show a transient status message, like a toast."""
        color = self.colors["success"] if level == "success" else self.colors["danger"]
        self.status_label.setStyleSheet(f"color: {color}; font-weight: bold;")
        self.status_label.setText(message)
        self._status_timer.start(3000)
        if level == "success":
            logger.info(message)
        else:
            logger.warning(message)

    def _on_tree_changed(self, store: TreeStore):
        self._render_tree(store)
        self.json_preview.setPlainText(self.session.json_output)
        if self.root_edit.text() != store.root_label:
            self.root_edit.setText(store.root_label)

    def _render_tree(self, store: TreeStore):
        self.tree_widget.clear()

        def add_nodes(parent, nodes: List[Node], prefix: List[int]):
            for index, node in enumerate(nodes):
                path = prefix + [index]
                is_folder = isinstance(node, Folder)
                item = QTreeWidgetItem([node.name, "" if is_folder else node.url])
                item.setData(0, PATH_ROLE, path)
                item.setData(1, PATH_ROLE, "folder" if is_folder else "link")
                item.setForeground(0, QColor(self.colors["folder"] if is_folder else self.colors["link"]))
                if parent is None:
                    self.tree_widget.addTopLevelItem(item)
                else:
                    parent.addChild(item)
                if is_folder:
                    add_nodes(item, node.children, path)

        add_nodes(None, store.items, [])
        self.tree_widget.expandAll()

    def _selected_path(self) -> Optional[List[int]]:
        item = self.tree_widget.currentItem()
        if item is None:
            self._notify("Select an item first", "error")
            return None
        return list(item.data(0, PATH_ROLE))

    def _ask(self, title: str, is_folder: bool, node: Optional[Node] = None):
        dialog = ItemDialog(title, is_folder, node, self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return None
        return dialog.values()

    def _apply(self, action, success_message: Optional[str] = None):
        try:
            action()
        except PartialMoveError as e:
            self._notify(f"{e} (moved back to the top level)", "error")
            return
        except (FavoritesError, OSError) as e:
            self._notify(str(e), "error")
            return
        if success_message:
            self._notify(success_message)

    def _add_folder(self):
        values = self._ask("Add Folder", True)
        if values:
            self._apply(lambda: self.session.add_folder(values[0]))

    def _add_link(self):
        values = self._ask("Add Link", False)
        if values:
            self._apply(lambda: self.session.add_link(values[0], values[1]))

    def _add_child_folder(self):
        path = self._selected_path()
        if path is None:
            return
        values = self._ask("Add Subfolder", True)
        if values:
            self._apply(lambda: self.session.add_folder(values[0], path))

    def _add_child_link(self):
        path = self._selected_path()
        if path is None:
            return
        values = self._ask("Add Link to Folder", False)
        if values:
            self._apply(lambda: self.session.add_link(values[0], values[1], path))

    def _edit_selected(self):
        path = self._selected_path()
        if path is None:
            return
        node = self.session.store.get(path)
        if node is None:
            return
        is_folder = isinstance(node, Folder)
        values = self._ask("Edit Folder" if is_folder else "Edit Link", is_folder, node)
        if values:
            self._apply(lambda: self.session.store.edit(path, name=values[0], url=values[1]))

    def _delete_selected(self):
        path = self._selected_path()
        if path is None:
            return
        node = self.session.store.get(path)
        if node is None:
            return
        answer = QMessageBox.question(self, "Delete", f"Are you sure you want to delete '{node.name}'?")
        if answer == QMessageBox.StandardButton.Yes:
            self.session.store.remove(path)

    def _move_requested(self, source_path: list, dest_path: list, mode: MoveMode):
        if not self.session.mover.can_move(source_path, dest_path):
            self._notify("Cannot move a folder into itself", "error")
            return
        node = self.session.store.get(source_path)
        message = None
        if mode == MoveMode.INTO_FOLDER and node is not None:
            target = self.session.store.get(dest_path)
            message = f'Moved "{node.name}" into "{target.name if target else ""}"'
        self._apply(lambda: self.session.move(source_path, dest_path, mode), message)

    def _root_label_changed(self):
        if self.root_edit.text().strip() != self.session.store.root_label:
            self.session.store.root_label = self.root_edit.text()

    def _import_file(self):
        filename, _ = QFileDialog.getOpenFileName(self, "Import configuration", "", IMPORT_FILTER)
        if not filename:
            return
        self._apply(lambda: self.session.import_file(Path(filename)), "Configuration imported!")

    def _export(self, format_name: str):
        label = "Windows (Intune)" if format_name == "windows" else "macOS"
        self._apply(lambda: self.session.export(format_name), f"{label} configuration exported!")

    def _copy_json(self):
        text = self.session.json_output
        if not text:
            self._notify("No JSON to copy", "error")
            return
        QApplication.clipboard().setText(text)
        self._notify("JSON copied to clipboard!")


def run_gui(config: Optional[dict] = None) -> int:
    """Run the PyQt6 editor."""
    app = QApplication(sys.argv)
    app.setStyle('Fusion')

    palette = QPalette()
    palette.setColor(QPalette.ColorRole.Window, QColor(THEME["background"]))
    palette.setColor(QPalette.ColorRole.WindowText, QColor(THEME["text"]))
    palette.setColor(QPalette.ColorRole.Base, QColor(THEME["surface"]))
    palette.setColor(QPalette.ColorRole.Text, QColor(THEME["text"]))
    palette.setColor(QPalette.ColorRole.Highlight, QColor(THEME["accent"]))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor("#ffffff"))
    app.setPalette(palette)

    window = FavoritesEditorGUI(config)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(run_gui())
