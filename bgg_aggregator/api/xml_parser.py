"""
Turns BGG XML API responses into plain dictionaries.

Attributes and child elements of an element are merged into one dict.
Text content is stored under "value" when the element also has attributes
or children, otherwise the element becomes its text. Repeated child tags
become lists, a lone child stays a bare object, so anything that can repeat
should go through ensure_list() before use.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)


def ensure_list(value: Any) -> List[Any]:
    """Return value as a list: None -> [], list -> itself, anything else -> [value]."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def element_to_dict(element: ET.Element) -> Any:
    """
    Convert an element and its subtree into a dict (or a string for text-only leaves).

    Args:
        element: Parsed XML element

    Returns:
        Dict of attributes and children, or the stripped text for simple leaves
    """
    text = (element.text or "").strip()
    children = list(element)
    if not element.attrib and not children:
        return text

    node: Dict[str, Any] = dict(element.attrib)
    for child in children:
        converted = element_to_dict(child)
        if child.tag in node:
            existing = node[child.tag]
            if isinstance(existing, list):
                existing.append(converted)
            else:
                node[child.tag] = [existing, converted]
        else:
            node[child.tag] = converted

    if text and "value" not in node:
        node["value"] = text
    return node


def parse_items(xml_text: Union[str, bytes]) -> List[Dict[str, Any]]:
    """
    Parse a collection or thing response into a list of item dicts.

    BGG answers unknown usernames with an <errors> document and a 200
    status, which yields an empty list here.

    Args:
        xml_text: Raw response body

    Returns:
        List of item dicts (possibly empty)

    Raises:
        ET.ParseError: If the body is not well-formed XML
    """
    root = ET.fromstring(xml_text)
    if root.tag != "items":
        message = root.findtext(".//message") or root.tag
        logger.warning(f"BGG returned no items: {message.strip()}")
        return []

    tree = element_to_dict(root)
    if not isinstance(tree, dict):
        return []
    return [item for item in ensure_list(tree.get("item")) if isinstance(item, dict)]
