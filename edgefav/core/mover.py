"""Relocation of nodes within the tree, the model behind drag and drop."""

import copy
from enum import Enum
from typing import List
from edgefav.core.errors import InvalidPathError, MoveRejectedError, PartialMoveError
from edgefav.core.models import Folder, NodePath
from edgefav.core.paths import adjust_path_after_removal, format_path, is_descendant, paths_equal
from edgefav.core.store import TreeStore
from edgefav.utils.logger import setup_logger

logger = setup_logger()


class MoveMode(Enum):
    """Where a moved node lands relative to the destination path."""
    REORDER = "reorder"  # Take the destination's sibling position
    INTO_FOLDER = "into_folder"  # Append to the destination folder's children


class MoveCoordinator:
    """Moves nodes by clone, remove, adjust, insert."""

    def __init__(self, store: TreeStore):
        self.store = store

    def can_move(self, source_path: NodePath, dest_path: NodePath) -> bool:
        """False if dest is the source itself or inside it."""
        return not (paths_equal(dest_path, source_path) or is_descendant(dest_path, source_path))

    def move(self, source_path: NodePath, dest_path: NodePath,
             mode: MoveMode = MoveMode.REORDER) -> List[int]:
        """
        Move the node at source_path.

        Args:
            source_path: Node to move
            dest_path: Sibling position (REORDER) or target folder (INTO_FOLDER)
            mode: Move mode

        Returns:
            Final path of the moved node

        Raises:
            MoveRejectedError: If dest_path is source_path or one of its descendants
            InvalidPathError: If source_path (or, for REORDER, dest_path) does not resolve
            PartialMoveError: If the node was removed but its destination turned out
                invalid; the detached node is on the exception
        """
        if not self.can_move(source_path, dest_path):
            raise MoveRejectedError("Cannot move a folder into itself")

        original = self.store.get(source_path)
        if original is None:
            raise InvalidPathError(f"Nothing to move at {format_path(source_path)}")
        if mode == MoveMode.REORDER and self.store.get(dest_path) is None:
            raise InvalidPathError(f"No drop target at {format_path(dest_path)}")

        moved = copy.deepcopy(original)
        self.store.remove(source_path)
        adjusted = adjust_path_after_removal(dest_path, source_path)

        if mode == MoveMode.INTO_FOLDER:
            target = self.store.get(adjusted)
            if not isinstance(target, Folder):
                logger.error(f"Move of '{moved.name}' abandoned: {format_path(adjusted)} is not a folder")
                raise PartialMoveError(
                    f"'{moved.name}' was removed but {format_path(adjusted)} is not a folder",
                    moved
                )
            self.store.add_child(adjusted, moved, validate=False)
            final_path = adjusted + [len(target.children) - 1]
            logger.info(f"Moved \"{moved.name}\" into \"{target.name}\"")
            return final_path

        try:
            self.store.insert(adjusted, moved)
        except InvalidPathError as e:
            logger.error(f"Move of '{moved.name}' abandoned: {e}")
            raise PartialMoveError(f"'{moved.name}' was removed but could not be reinserted: {e}", moved)
        logger.debug(f"Moved '{moved.name}' from {format_path(source_path)} to {format_path(adjusted)}")
        return adjusted
