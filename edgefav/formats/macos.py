"""macOS configuration profile (.mobileconfig) codec."""

import uuid
import xml.etree.ElementTree as ET
from typing import Any, Dict, List
from xml.sax.saxutils import escape
from edgefav.core.errors import FormatError
from edgefav.core.export_model import build_export_model, load_export_model
from edgefav.core.models import FavoritesTree, count_nodes
from edgefav.formats.base import FormatCodec
from edgefav.formats.plist import decode_array, find_keyed_value
from edgefav.utils.logger import setup_logger

logger = setup_logger()

MANAGED_FAVORITES_KEY = "ManagedFavorites"
DEFAULT_DISPLAY_NAME = "Edge Managed Favorites"
DEFAULT_PAYLOAD_IDENTIFIER = "com.example.edge.managedfavorites"

# Depth of the ManagedFavorites entries inside the profile template
ENTRY_INDENT = " " * 36
STEP = " " * 4

PROFILE_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
    <key>PayloadContent</key>
    <array>
        <dict>
            <key>PayloadContent</key>
            <dict>
                <key>com.microsoft.Edge</key>
                <dict>
                    <key>Forced</key>
                    <array>
                        <dict>
                            <key>mcx_preference_settings</key>
                            <dict>
                                <key>ManagedFavorites</key>
                                <array>
{favorites}                                </array>
                            </dict>
                        </dict>
                    </array>
                </dict>
            </dict>
            <key>PayloadDisplayName</key>
            <string>Microsoft Edge Preferences</string>
            <key>PayloadIdentifier</key>
            <string>com.microsoft.Edge.preferences</string>
            <key>PayloadType</key>
            <string>com.apple.ManagedClient.preferences</string>
            <key>PayloadUUID</key>
            <string>{inner_uuid}</string>
            <key>PayloadVersion</key>
            <integer>1</integer>
        </dict>
    </array>
    <key>PayloadDisplayName</key>
    <string>{display_name}</string>
    <key>PayloadIdentifier</key>
    <string>{identifier}</string>
    <key>PayloadType</key>
    <string>Configuration</string>
    <key>PayloadUUID</key>
    <string>{outer_uuid}</string>
    <key>PayloadVersion</key>
    <integer>1</integer>
</dict>
</plist>"""


def escape_xml(text: Any) -> str:
    """Escape the five XML special characters."""
    return escape("" if text is None else str(text), {'"': "&quot;", "'": "&apos;"})


def new_payload_uuid() -> str:
    return str(uuid.uuid4()).upper()


class MacOSCodec(FormatCodec):
    """Renders the export array as a plist inside a configuration profile."""

    name = "macos"
    file_suffix = ".mobileconfig"

    def __init__(self, display_name: str = DEFAULT_DISPLAY_NAME,
                 payload_identifier: str = DEFAULT_PAYLOAD_IDENTIFIER):
        """
        Initialize macOS codec.

        Args:
            display_name: Profile name shown in System Settings
            payload_identifier: Reverse-DNS identifier of the profile
        """
        self.display_name = display_name
        self.payload_identifier = payload_identifier

    def _folder_xml(self, entry: Dict[str, Any], indent: str) -> List[str]:
        lines = [
            f"{indent}<dict>",
            f"{indent}{STEP}<key>name</key>",
            f"{indent}{STEP}<string>{escape_xml(entry.get('name'))}</string>",
            f"{indent}{STEP}<key>children</key>",
            f"{indent}{STEP}<array>",
        ]
        child_indent = indent + STEP * 2
        for child in entry.get("children", []):
            if "children" in child:
                lines.extend(self._folder_xml(child, child_indent))
            else:
                lines.extend([
                    f"{child_indent}<dict>",
                    f"{child_indent}{STEP}<key>name</key>",
                    f"{child_indent}{STEP}<string>{escape_xml(child.get('name'))}</string>",
                    f"{child_indent}{STEP}<key>url</key>",
                    f"{child_indent}{STEP}<string>{escape_xml(child.get('url'))}</string>",
                    f"{child_indent}</dict>",
                ])
        lines.append(f"{indent}{STEP}</array>")
        lines.append(f"{indent}</dict>")
        return lines

    def favorites_xml(self, tree: FavoritesTree) -> str:
        """The <dict> entries placed inside the ManagedFavorites array."""
        lines: List[str] = []
        for entry in build_export_model(tree):
            if "toplevel_name" in entry:
                lines.extend([
                    f"{ENTRY_INDENT}<dict>",
                    f"{ENTRY_INDENT}{STEP}<key>toplevel_name</key>",
                    f"{ENTRY_INDENT}{STEP}<string>{escape_xml(entry['toplevel_name'])}</string>",
                    f"{ENTRY_INDENT}</dict>",
                ])
            else:
                lines.extend(self._folder_xml(entry, ENTRY_INDENT))
        return "".join(line + "\n" for line in lines)

    def export_document(self, tree: FavoritesTree) -> str:
        """Render a complete .mobileconfig document with fresh payload UUIDs."""
        document = PROFILE_TEMPLATE.format(
            favorites=self.favorites_xml(tree),
            inner_uuid=new_payload_uuid(),
            outer_uuid=new_payload_uuid(),
            display_name=escape_xml(self.display_name),
            identifier=escape_xml(self.payload_identifier),
        )
        folders, links = count_nodes(tree.items)
        logger.info(f"Exported {folders} folders and {links} links as macOS profile")
        return document

    def import_document(self, text: str) -> FavoritesTree:
        """
        Read the favourites out of any XML document holding a
        ``<key>ManagedFavorites</key><array>...</array>`` pair.

        Raises:
            FormatError: If the XML is malformed, or the key is missing or not
                followed by an array. Malformed entries inside the array are
                skipped.
        """
        try:
            root = ET.fromstring(text.encode("utf-8"))
        except ET.ParseError as e:
            logger.error(f"macOS import failed: not XML ({e})")
            raise FormatError(f"Invalid mobileconfig file: {e}")

        array = find_keyed_value(root, MANAGED_FAVORITES_KEY)
        if array is None or array.tag != "array":
            logger.error("macOS import failed: ManagedFavorites array not found")
            raise FormatError("Invalid mobileconfig format: ManagedFavorites array not found")

        entries = decode_array(array)
        tree = load_export_model(entries)
        folders, links = count_nodes(tree.items)
        logger.info(f"Imported {folders} folders and {links} links from macOS profile")
        return tree
