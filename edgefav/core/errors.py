"""Exceptions raised by the favourites tree and its codecs."""


class FavoritesError(Exception):
    """Base exception for favourites editing errors."""
    pass


class InvalidPathError(FavoritesError):
    """Path resolves to nothing or to the wrong kind of node."""
    pass


class MoveRejectedError(InvalidPathError):
    """Destination is the moved node itself or lies inside it."""
    pass


class PartialMoveError(InvalidPathError):
    """Node was detached from its source but could not be placed."""

    def __init__(self, message: str, node):
        super().__init__(message)
        self.node = node


class FormatError(FavoritesError):
    """Import document is malformed or missing a required field."""
    pass


class ValidationError(FavoritesError):
    """User supplied name or URL is empty."""
    pass
