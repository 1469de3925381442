"""Base class for management format codecs."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
from edgefav.core.errors import FormatError
from edgefav.core.models import FavoritesTree


class FormatCodec(ABC):
    """Abstract base class for export/import of a vendor document."""

    name: str = ""
    file_suffix: str = ""

    @abstractmethod
    def export_document(self, tree: FavoritesTree) -> str:
        """Render the tree as a complete vendor document."""
        pass

    @abstractmethod
    def import_document(self, text: str) -> FavoritesTree:
        """
        Parse a vendor document into a new tree.

        Raises:
            FormatError: If the document is malformed
        """
        pass


SUFFIX_FORMATS: Dict[str, str] = {
    ".json": "windows",
    ".mobileconfig": "macos",
    ".plist": "macos",
    ".xml": "macos",
}


def get_codec(format_name: str, config: Optional[dict] = None) -> FormatCodec:
    """
    Create the codec for a format name.

    Args:
        format_name: 'windows' or 'macos'
        config: Optional configuration dict (see main.load_config)
    """
    from edgefav.formats.macos import DEFAULT_DISPLAY_NAME, DEFAULT_PAYLOAD_IDENTIFIER, MacOSCodec
    from edgefav.formats.windows import DEFAULT_POLICY_NAME, WindowsCodec

    config = config or {}
    if format_name == "windows":
        options = config.get("windows") or {}
        return WindowsCodec(
            policy_name=options.get("policy_name", DEFAULT_POLICY_NAME),
            description=options.get("description", "")
        )
    if format_name == "macos":
        options = config.get("macos") or {}
        return MacOSCodec(
            display_name=options.get("display_name", DEFAULT_DISPLAY_NAME),
            payload_identifier=options.get("payload_identifier", DEFAULT_PAYLOAD_IDENTIFIER)
        )
    raise FormatError(f"Unknown format: {format_name}")


def detect_format(path: Optional[Path], text: str) -> str:
    """
    Guess the format of an import document.

    The file suffix wins; otherwise the first non-blank character is
    inspected.
    """
    if path is not None:
        by_suffix = SUFFIX_FORMATS.get(Path(path).suffix.lower())
        if by_suffix:
            return by_suffix

    stripped = text.lstrip("\ufeff \t\r\n")
    if stripped.startswith("{"):
        return "windows"
    if stripped.startswith("<"):
        return "macos"
    raise FormatError("Could not determine document format")
