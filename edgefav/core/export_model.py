"""Vendor-neutral array form of the favourites tree.

Both management formats carry the same structure::

    [{"toplevel_name": "..."},
     {"name": "...", "children": [{"name": "...", "url": "..."}, ...]},
     ...]
"""

import json
from typing import Any, Dict, List
from edgefav.core.models import DEFAULT_ROOT_LABEL, FavoritesTree, Folder, Link, Node, count_nodes
from edgefav.utils.logger import setup_logger

logger = setup_logger()

LINKS_FOLDER_NAME = "Links"

ExportModel = List[Dict[str, Any]]


def _link_entry(link: Link) -> Dict[str, Any]:
    return {"name": link.name or "", "url": link.url or ""}


def _folder_entry(folder: Folder) -> Dict[str, Any]:
    """Convert a folder and everything below it."""
    children = []
    for child in folder.children:
        if isinstance(child, Folder):
            children.append(_folder_entry(child))
        else:
            children.append(_link_entry(child))
    return {"name": folder.name or "", "children": children}


def build_export_model(tree: FavoritesTree) -> ExportModel:
    """
    Build the export array for a tree.

    Top-level folders keep their order; top-level links are gathered,
    in order, into a trailing "Links" folder since the management
    formats only accept folders at the top level.
    """
    model: ExportModel = [{"toplevel_name": tree.root_label or DEFAULT_ROOT_LABEL}]

    standalone_links = []
    for node in tree.items:
        if isinstance(node, Folder):
            model.append(_folder_entry(node))
        else:
            standalone_links.append(_link_entry(node))

    if standalone_links:
        model.append({"name": LINKS_FOLDER_NAME, "children": standalone_links})

    return model


def export_model_json(tree: FavoritesTree, indent: int = 2) -> str:
    """Render the export array as pretty JSON."""
    return json.dumps(build_export_model(tree), indent=indent, ensure_ascii=False)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _convert_children(raw_children: Any) -> List[Node]:
    children: List[Node] = []
    if not isinstance(raw_children, list):
        return children
    for child in raw_children:
        if not isinstance(child, dict):
            continue
        # Presence of "children", even empty, marks a nested folder
        if "children" in child:
            children.append(_convert_folder(child))
        else:
            children.append(Link(name=_text(child.get("name")), url=_text(child.get("url"))))
    return children


def _convert_folder(entry: Dict[str, Any]) -> Folder:
    return Folder(name=_text(entry.get("name")), children=_convert_children(entry.get("children")))


def load_export_model(entries: Any) -> FavoritesTree:
    """
    Build a fresh tree from a decoded export array.

    Entries carrying ``toplevel_name`` set the root label (the last one
    wins). Any other entry with a non-empty name becomes a top-level
    folder. Entries matching neither shape are skipped so that partially
    valid documents still load.
    """
    tree = FavoritesTree()
    skipped = 0

    for entry in entries:
        if not isinstance(entry, dict):
            skipped += 1
            continue
        if "toplevel_name" in entry:
            tree.root_label = _text(entry["toplevel_name"])
        elif entry.get("name"):
            tree.items.append(_convert_folder(entry))
        else:
            skipped += 1

    if skipped:
        logger.warning(f"Skipped {skipped} unrecognised entr{'y' if skipped == 1 else 'ies'}")

    folders, links = count_nodes(tree.items)
    logger.debug(f"Loaded {folders} folders and {links} links under '{tree.root_label}'")
    return tree
