"""Recursive-descent decoder for XML property list elements.

Only the element level is handled here; the caller parses the document
with ElementTree and hands over the element to decode.
"""

import base64
import binascii
from typing import Dict, List, Optional, Union
import xml.etree.ElementTree as ET
from edgefav.core.errors import FormatError
from edgefav.utils.logger import setup_logger

logger = setup_logger()

PlistValue = Union[str, int, float, bool, bytes, List['PlistValue'], Dict[str, 'PlistValue']]


def element_text(element: ET.Element) -> str:
    """All text inside element, like the DOM textContent."""
    return "".join(element.itertext())


def decode_value(element: ET.Element) -> PlistValue:
    """
    Decode one plist value element.

    Raises:
        FormatError: On unknown tags, bad scalars or broken dict pairing
    """
    tag = element.tag
    if tag == "string" or tag == "date":
        return element_text(element)
    if tag == "array":
        return decode_array(element)
    if tag == "dict":
        return decode_dict(element)
    if tag == "true":
        return True
    if tag == "false":
        return False
    if tag == "integer":
        try:
            return int(element_text(element).strip())
        except ValueError:
            raise FormatError(f"Invalid plist integer: {element_text(element)!r}")
    if tag == "real":
        try:
            return float(element_text(element).strip())
        except ValueError:
            raise FormatError(f"Invalid plist real: {element_text(element)!r}")
    if tag == "data":
        try:
            return base64.b64decode("".join(element_text(element).split()))
        except (binascii.Error, ValueError):
            raise FormatError("Invalid plist data block")
    raise FormatError(f"Unexpected plist element <{tag}>")


def decode_array(element: ET.Element) -> List[PlistValue]:
    """
    Decode the children of an array element in order.

    A child that fails to decode is dropped with a warning, so one broken
    entry does not discard its siblings.
    """
    values: List[PlistValue] = []
    for child in element:
        try:
            values.append(decode_value(child))
        except FormatError as e:
            logger.warning(f"Skipping plist array item <{child.tag}>: {e}")
    return values


def decode_dict(element: ET.Element) -> Dict[str, PlistValue]:
    """Decode a dict element: alternating key and value children."""
    children = list(element)
    if len(children) % 2 != 0:
        raise FormatError(f"Plist dict has {len(children)} children, expected key/value pairs")

    result: Dict[str, PlistValue] = {}
    for key_element, value_element in zip(children[0::2], children[1::2]):
        if key_element.tag != "key":
            raise FormatError(f"Expected <key> in plist dict, found <{key_element.tag}>")
        if value_element.tag == "key":
            raise FormatError(f"Key {element_text(key_element)!r} has no value")
        result[element_text(key_element)] = decode_value(value_element)
    return result


def find_keyed_value(root: ET.Element, key: str) -> Optional[ET.Element]:
    """
    Find the element following the first <key> whose text equals key.

    Keys are searched in document order anywhere below root, regardless
    of nesting. Returns None if no such key exists or it is the last
    child of its parent.
    """
    parents = {child: parent for parent in root.iter() for child in parent}
    for element in root.iter("key"):
        if element_text(element) != key:
            continue
        parent = parents.get(element)
        if parent is None:
            return None
        siblings = list(parent)
        position = siblings.index(element)
        if position + 1 < len(siblings):
            return siblings[position + 1]
        return None
    return None
