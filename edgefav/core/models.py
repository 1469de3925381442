"""Data models for managed favourites."""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, Union
from edgefav.utils.validators import require_name, require_url

DEFAULT_ROOT_LABEL = "Managed favourites"


@dataclass
class Link:
    """Represents a favourite URL."""
    name: str = ""
    url: str = ""


@dataclass
class Folder:
    """Represents a folder containing links and subfolders."""
    name: str = ""
    children: List[Union['Folder', Link]] = field(default_factory=list)

    def add_child(self, child: Union['Folder', Link]):
        """Append a child link or folder."""
        self.children.append(child)


Node = Union[Folder, Link]

# Positional address: path[0] indexes the forest, later entries index children
NodePath = Sequence[int]


@dataclass
class FavoritesTree:
    """The whole editable forest plus the label of its top-level folder."""
    root_label: str = DEFAULT_ROOT_LABEL
    items: List[Node] = field(default_factory=list)


def new_folder(name: str) -> Folder:
    """Create an empty folder from user input."""
    return Folder(name=require_name(name))


def new_link(name: str, url: str) -> Link:
    """Create a link from user input."""
    return Link(name=require_name(name), url=require_url(url))


def count_nodes(items: Sequence[Node]) -> Tuple[int, int]:
    """
    Count folders and links recursively.

    Returns:
        (folders, links)
    """
    folders = 0
    links = 0
    for node in items:
        if isinstance(node, Folder):
            folders += 1
            sub_folders, sub_links = count_nodes(node.children)
            folders += sub_folders
            links += sub_links
        else:
            links += 1
    return folders, links
