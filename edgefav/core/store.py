"""Owner of the editable favourites tree."""

from typing import Callable, List, Optional
from edgefav.core.errors import InvalidPathError
from edgefav.core.export_model import ExportModel, build_export_model
from edgefav.core.models import DEFAULT_ROOT_LABEL, FavoritesTree, Folder, Link, Node, NodePath
from edgefav.core.paths import format_path, resolve, resolve_parent
from edgefav.utils.logger import setup_logger
from edgefav.utils.validators import require_name, require_url

logger = setup_logger()

ChangeListener = Callable[['TreeStore'], None]


class TreeStore:
    """Holds the forest and applies path-addressed mutations to it."""

    def __init__(self, tree: Optional[FavoritesTree] = None):
        """
        Initialize the store.

        Args:
            tree: Initial tree (an empty one if omitted)
        """
        self._tree = tree if tree is not None else FavoritesTree()
        self._listeners: List[ChangeListener] = []

    @property
    def tree(self) -> FavoritesTree:
        return self._tree

    @property
    def items(self) -> List[Node]:
        return self._tree.items

    @property
    def root_label(self) -> str:
        return self._tree.root_label

    @root_label.setter
    def root_label(self, label: str):
        self._tree.root_label = (label or "").strip() or DEFAULT_ROOT_LABEL
        self._notify()

    def subscribe(self, listener: ChangeListener):
        """Register a callback run after every successful mutation."""
        self._listeners.append(listener)

    def _notify(self):
        for listener in self._listeners:
            listener(self)

    def export_model(self) -> ExportModel:
        """Current export array for the tree."""
        return build_export_model(self._tree)

    def get(self, path: NodePath) -> Optional[Node]:
        """Node at path, or None."""
        return resolve(self._tree.items, path)

    def insert(self, path: NodePath, node: Node):
        """
        Insert node at path, shifting later siblings right.

        The final index may equal the container length (append).

        Raises:
            InvalidPathError: If path does not name a position in a folder
        """
        located = resolve_parent(self._tree.items, path)
        if located is None:
            raise InvalidPathError(f"No container at path {format_path(path)}")
        container, index = located
        if not 0 <= index <= len(container):
            raise InvalidPathError(f"Index {index} out of range at path {format_path(path)}")
        container.insert(index, node)
        logger.debug(f"Inserted '{node.name}' at {format_path(path)}")
        self._notify()

    def remove(self, path: NodePath) -> Optional[Node]:
        """Remove and return the node at path; None if path is invalid."""
        located = resolve_parent(self._tree.items, path)
        if located is None:
            return None
        container, index = located
        if not 0 <= index < len(container):
            return None
        node = container.pop(index)
        logger.debug(f"Removed '{node.name}' from {format_path(path)}")
        self._notify()
        return node

    def edit(self, path: NodePath, name: Optional[str] = None, url: Optional[str] = None):
        """
        Overwrite the supplied fields of the node at path.

        Args:
            path: Node to edit
            name: New name (unchanged if None)
            url: New URL, links only (unchanged if None)

        Raises:
            InvalidPathError: If path does not resolve, or url is given for a folder
            ValidationError: If a supplied field is blank
        """
        node = self.get(path)
        if node is None:
            raise InvalidPathError(f"Nothing found at path {format_path(path)}")
        if url is not None and not isinstance(node, Link):
            raise InvalidPathError(f"Node at {format_path(path)} is a folder and has no URL")

        new_name = require_name(name) if name is not None else None
        new_url = require_url(url) if url is not None else None

        if new_name is not None:
            node.name = new_name
        if new_url is not None:
            node.url = new_url
        logger.debug(f"Edited {format_path(path)}")
        self._notify()

    def add_child(self, parent_path: NodePath, node: Node, validate: bool = True):
        """
        Append node to the children of the folder at parent_path.

        Args:
            parent_path: Folder receiving the node
            node: Node to append
            validate: Check the node's name and URL (off for relocated nodes)

        Raises:
            InvalidPathError: If parent_path is missing or names a link
            ValidationError: If the node has a blank name or URL
        """
        parent = self.get(parent_path)
        if parent is None:
            raise InvalidPathError(f"Nothing found at path {format_path(parent_path)}")
        if not isinstance(parent, Folder):
            raise InvalidPathError(f"Node at {format_path(parent_path)} is not a folder")
        if validate:
            _validate(node)
        parent.add_child(node)
        logger.debug(f"Added '{node.name}' to folder '{parent.name}'")
        self._notify()

    def add_root(self, node: Node):
        """Append node to the top-level forest."""
        _validate(node)
        self._tree.items.append(node)
        logger.debug(f"Added '{node.name}' at top level")
        self._notify()

    def load(self, tree: FavoritesTree):
        """Replace the whole tree, e.g. after a successful import."""
        self._tree = tree
        self._notify()

    def clear(self):
        """Reset to an empty forest with the default root label."""
        self.load(FavoritesTree())


def _validate(node: Node):
    require_name(node.name)
    if isinstance(node, Link):
        require_url(node.url)
