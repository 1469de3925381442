"""Positional path helpers for the favourites forest.

A path is a sequence of zero-based indices: the first indexes the
top-level items, each following one indexes the children of the folder
reached so far. Paths describe position only, so they go stale whenever
an earlier sibling is inserted or removed.
"""

from typing import List, Optional, Sequence, Tuple
from edgefav.core.models import Folder, Node, NodePath


def _in_range(index: int, container: Sequence) -> bool:
    return 0 <= index < len(container)


def resolve(items: List[Node], path: NodePath) -> Optional[Node]:
    """
    Find the node addressed by path.

    Returns None when the path is empty, an index is out of range, or an
    intermediate node is a link.
    """
    if not path:
        return None
    if not _in_range(path[0], items):
        return None
    node = items[path[0]]
    for index in path[1:]:
        if not isinstance(node, Folder) or not _in_range(index, node.children):
            return None
        node = node.children[index]
    return node


def resolve_parent(items: List[Node], path: NodePath) -> Optional[Tuple[List[Node], int]]:
    """
    Find the sibling list that holds the position named by path.

    Args:
        items: Top-level forest
        path: Position to look up (the final index is not range checked)

    Returns:
        (container, index_in_container) or None if the prefix does not
        resolve to a folder.
    """
    if not path:
        return None
    if len(path) == 1:
        return items, path[0]
    parent = resolve(items, path[:-1])
    if not isinstance(parent, Folder):
        return None
    return parent.children, path[-1]


def paths_equal(path_a: NodePath, path_b: NodePath) -> bool:
    """True if both paths have the same length and indices."""
    return len(path_a) == len(path_b) and all(a == b for a, b in zip(path_a, path_b))


def is_descendant(candidate: NodePath, ancestor: NodePath) -> bool:
    """True if candidate lies strictly below ancestor."""
    if len(candidate) <= len(ancestor):
        return False
    return all(a == c for a, c in zip(ancestor, candidate))


def adjust_path_after_removal(target: NodePath, removed: NodePath) -> List[int]:
    """
    Recompute target after the node at removed was spliced out.

    Only a sibling removal shifts the target: both paths must have the
    same depth and the same parent prefix, and the removed index must
    come before the target index.
    """
    adjusted = list(target)
    if len(removed) != len(adjusted) or not removed:
        return adjusted

    depth = len(removed) - 1
    if list(removed[:depth]) != adjusted[:depth]:
        return adjusted

    if removed[depth] < adjusted[depth]:
        adjusted[depth] -= 1
    return adjusted


def format_path(path: NodePath) -> str:
    """Render a path as dotted indices, e.g. ``0.2.1``."""
    return ".".join(str(index) for index in path)


def parse_path(text: str) -> List[int]:
    """
    Parse dotted indices back into a path.

    Raises:
        ValueError: If a segment is not a non-negative integer
    """
    text = (text or "").strip()
    if not text:
        raise ValueError("Path is empty")
    path = []
    for segment in text.split("."):
        segment = segment.strip()
        if not segment.isdigit():
            raise ValueError(f"Invalid path segment: {segment!r}")
        path.append(int(segment))
    return path
