"""Interactive CLI editor."""

from pathlib import Path
from typing import Optional, List, Callable
from edgefav.backup.export_manager import ExportManager
from edgefav.core.errors import FavoritesError, PartialMoveError
from edgefav.core.export_model import export_model_json
from edgefav.core.models import FavoritesTree, Folder, Node, NodePath, new_folder, new_link
from edgefav.core.mover import MoveCoordinator, MoveMode
from edgefav.core.paths import format_path, parse_path
from edgefav.core.store import TreeStore
from edgefav.formats.base import detect_format, get_codec
from edgefav.utils.logger import setup_logger

logger = setup_logger()


def prompt_yes_no(question: str, default: bool = True) -> bool:
    """
    Prompt user for yes/no answer.

    Args:
        question: Question to ask
        default: Default value

    Returns:
        True for yes, False for no
    """
    default_str = "Y/n" if default else "y/N"
    while True:
        response = input(f"{question} [{default_str}]: ").strip().lower()
        if not response:
            return default
        if response in ['y', 'yes']:
            return True
        if response in ['n', 'no']:
            return False
        print("Please enter 'y' or 'n'")


def prompt_choice(question: str, choices: List[str], default: Optional[int] = None) -> int:
    """
    Prompt user to choose from a list.

    Args:
        question: Question to ask
        choices: List of choice strings
        default: Default choice index (None for no default)

    Returns:
        Selected choice index
    """
    print(f"\n{question}")
    for i, choice in enumerate(choices, 1):
        marker = " (default)" if default == i - 1 else ""
        print(f"  {i}. {choice}{marker}")

    while True:
        try:
            response = input(f"\nEnter choice [1-{len(choices)}]: ").strip()
            if not response and default is not None:
                return default
            choice_num = int(response)
            if 1 <= choice_num <= len(choices):
                return choice_num - 1
            print(f"Please enter a number between 1 and {len(choices)}")
        except ValueError:
            print("Please enter a valid number")


def prompt_text(question: str, default: Optional[str] = None, validator: Optional[Callable[[str], bool]] = None) -> str:
    """
    Prompt user for text input.

    Args:
        question: Question to ask
        default: Default value
        validator: Optional validation function

    Returns:
        User input string
    """
    default_str = f" [{default}]" if default else ""
    while True:
        response = input(f"{question}{default_str}: ").strip()
        if not response:
            if default:
                return default
            print("Please enter a value")
            continue

        if validator and not validator(response):
            continue

        return response


def prompt_path(question: str) -> List[int]:
    """Prompt for a dotted path such as 0.2.1."""
    while True:
        try:
            return parse_path(input(f"{question} (e.g. 0.1): "))
        except ValueError as e:
            print(e)


def format_outline(tree: FavoritesTree) -> str:
    """
    Render the tree as an indented outline, one node per line, each
    prefixed with its dotted path.
    """
    lines = [f"📚 {tree.root_label}"]

    def walk(nodes: List[Node], prefix: List[int], depth: int):
        for index, node in enumerate(nodes):
            path = prefix + [index]
            indent = "  " * (depth + 1)
            if isinstance(node, Folder):
                lines.append(f"{indent}[{format_path(path)}] 📁 {node.name}")
                walk(node.children, path, depth + 1)
            else:
                lines.append(f"{indent}[{format_path(path)}] 🔗 {node.name} <{node.url}>")

    if tree.items:
        walk(tree.items, [], 0)
    else:
        lines.append("  (no folders or links added yet)")
    return "\n".join(lines)


class EditorSession:
    """One in-memory editing session over a favourites tree."""

    def __init__(self, config: Optional[dict] = None,
                 export_manager: Optional[ExportManager] = None):
        self.config = config or {}
        self.store = TreeStore()
        self.mover = MoveCoordinator(self.store)
        self.export_manager = export_manager or ExportManager(Path(self.config.get("export_dir", "./exports")))
        if self.config.get("root_label"):
            self.store.root_label = self.config["root_label"]
        self.json_output = ""
        self.store.subscribe(self._refresh_json)
        self._refresh_json(self.store)

    def _refresh_json(self, store: TreeStore):
        self.json_output = export_model_json(store.tree)

    def add_folder(self, name: str, parent_path: Optional[NodePath] = None):
        folder = new_folder(name)
        if parent_path is None:
            self.store.add_root(folder)
        else:
            self.store.add_child(parent_path, folder)

    def add_link(self, name: str, url: str, parent_path: Optional[NodePath] = None):
        link = new_link(name, url)
        if parent_path is None:
            self.store.add_root(link)
        else:
            self.store.add_child(parent_path, link)

    def move(self, source_path: NodePath, dest_path: NodePath, mode: MoveMode) -> List[int]:
        """
        Move a node; if it ends up detached, put it back at the top level
        so nothing is lost.
        """
        try:
            return self.mover.move(source_path, dest_path, mode)
        except PartialMoveError as e:
            self.store.insert([len(self.store.items)], e.node)
            raise

    def import_file(self, path: Path, format_name: Optional[str] = None) -> FavoritesTree:
        """
        Replace the tree with the contents of an import file.

        The current tree is only replaced once the file parsed cleanly.
        """
        text = self.export_manager.read_document(path)
        format_name = format_name or detect_format(path, text)
        tree = get_codec(format_name, self.config).import_document(text)
        self.store.load(tree)
        return tree

    def export(self, format_name: str, output: Optional[Path] = None) -> Path:
        content = get_codec(format_name, self.config).export_document(self.store.tree)
        return self.export_manager.save(format_name, content, output)

    def outline(self) -> str:
        return format_outline(self.store.tree)


MENU = [
    "Show tree",
    "Add folder",
    "Add link",
    "Edit item",
    "Delete item",
    "Move item",
    "Set top-level folder name",
    "Show JSON",
    "Import file",
    "Export for Windows (Intune)",
    "Export for macOS (.mobileconfig)",
    "Quit",
]


def _run_action(session: EditorSession, action: int) -> bool:
    """Run one menu action; returns False to leave the editor."""
    if action == 0:
        print("\n" + session.outline())
    elif action == 1:
        name = prompt_text("Folder name")
        if prompt_yes_no("Add inside an existing folder?", default=False):
            session.add_folder(name, prompt_path("Folder path"))
        else:
            session.add_folder(name)
    elif action == 2:
        name = prompt_text("Link name")
        url = prompt_text("URL")
        if prompt_yes_no("Add inside a folder?", default=True):
            session.add_link(name, url, prompt_path("Folder path"))
        else:
            session.add_link(name, url)
    elif action == 3:
        path = prompt_path("Item path")
        node = session.store.get(path)
        if node is None:
            print(f"Nothing at {format_path(path)}")
            return True
        name = prompt_text("Name", default=node.name)
        url = prompt_text("URL", default=node.url) if not isinstance(node, Folder) else None
        session.store.edit(path, name=name, url=url)
    elif action == 4:
        path = prompt_path("Item path")
        node = session.store.get(path)
        if node is None:
            print(f"Nothing at {format_path(path)}")
        elif prompt_yes_no(f"Delete '{node.name}'?", default=False):
            session.store.remove(path)
    elif action == 5:
        source = prompt_path("Item to move")
        dest = prompt_path("Destination path")
        mode_idx = prompt_choice("Place it:", ["At that position", "Inside that folder"], default=0)
        mode = MoveMode.REORDER if mode_idx == 0 else MoveMode.INTO_FOLDER
        new_path = session.move(source, dest, mode)
        print(f"Moved to {format_path(new_path)}")
    elif action == 6:
        session.store.root_label = input("Top-level folder name: ")
        print(f"Top-level folder: {session.store.root_label}")
    elif action == 7:
        print(session.json_output)
    elif action == 8:
        path = Path(prompt_text("File to import"))
        if session.store.items and not prompt_yes_no("Replace the current tree?", default=False):
            return True
        session.import_file(path)
        print("✓ Configuration imported")
    elif action == 9:
        print(f"✓ Saved {session.export('windows')}")
    elif action == 10:
        print(f"✓ Saved {session.export('macos')}")
    else:
        return False
    return True


def run_editor(session: Optional[EditorSession] = None, config: Optional[dict] = None):
    """Prompt loop for editing favourites in the terminal."""
    session = session or EditorSession(config)
    print("\n=== Edge Managed Favourites - Interactive Editor ===")
    while True:
        action = prompt_choice("What would you like to do?", MENU, default=0)
        try:
            if not _run_action(session, action):
                break
        except PartialMoveError as e:
            print(f"✗ {e} (moved back to the top level)")
        except (FavoritesError, OSError) as e:
            print(f"✗ {e}")


def interactive_config_wizard() -> Optional[dict]:
    """
    Configuration wizard for first-time setup.

    Returns:
        Configuration dict, or None if the user declined to save
    """
    print("\n=== Edge Managed Favourites - Configuration Wizard ===\n")

    root_label = prompt_text("Top-level folder name", default="Managed favourites")
    export_dir = prompt_text("Export directory", default="./exports")

    print("\n=== Windows (Intune) ===")
    policy_name = prompt_text("Policy name", default="Edge_ManagedFavorites")

    print("\n=== macOS (.mobileconfig) ===")
    display_name = prompt_text("Profile display name", default="Edge Managed Favorites")
    identifier = prompt_text("Profile identifier", default="com.example.edge.managedfavorites")

    config = {
        "root_label": root_label,
        "export_dir": export_dir,
        "windows": {
            "policy_name": policy_name
        },
        "macos": {
            "display_name": display_name,
            "payload_identifier": identifier
        }
    }

    print("\n=== Configuration Summary ===")
    print(f"Top-level folder: {root_label}")
    print(f"Export directory: {export_dir}")
    print(f"Policy name: {policy_name}")
    print(f"Profile: {display_name} ({identifier})")

    if prompt_yes_no("\nSave this configuration?", default=True):
        return config
    else:
        return None
