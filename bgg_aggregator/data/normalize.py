"""
Normalization of raw BGG items into NormalizedPartial records.

Collection items and thing items carry the same facts in different
places: collection stats are attributes on <stats>, thing stats are
<tag value="..."/> children, and thing names come as a list of
name objects tagged primary/alternate.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from ..api.xml_parser import ensure_list
from ..config import NOT_RANKED, UNKNOWN_NAME
from ..models import NormalizedPartial

logger = logging.getLogger(__name__)

_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def extract_name(name: Any) -> str:
    """
    Get a display name from any of BGG's name shapes.

    Args:
        name: A string, a name object ({"value": ...}), or a list of name objects

    Returns:
        The name, preferring the primary entry of a list, or UNKNOWN_NAME
    """
    if isinstance(name, str):
        return name if name.strip() else UNKNOWN_NAME
    if isinstance(name, list):
        for entry in name:
            if isinstance(entry, dict) and entry.get("type") == "primary":
                value = entry.get("value")
                if isinstance(value, str) and value.strip():
                    return value
        first = name[0] if name else None
        if isinstance(first, dict):
            value = first.get("value")
            if isinstance(value, str) and value.strip():
                return value
        return UNKNOWN_NAME
    if isinstance(name, dict):
        value = name.get("value")
        if isinstance(value, str) and value.strip():
            return value
    return UNKNOWN_NAME


def _text(value: Any) -> Optional[str]:
    """Unwrap {"value": ...} wrappers down to a string."""
    if isinstance(value, dict):
        value = value.get("value")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value if isinstance(value, str) else None


def parse_int(value: Any) -> Optional[int]:
    """Parse the leading integer of a string ("12", "12.7" -> 12). None when absent or non-numeric."""
    text = _text(value)
    if text is None:
        return None
    match = _INT_PREFIX.match(text)
    return int(match.group(0)) if match else None


def parse_float(value: Any) -> Optional[float]:
    """Parse the leading decimal number of a string. None when absent or non-numeric."""
    text = _text(value)
    if text is None:
        return None
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(0)) if match else None


def parse_url(value: Any) -> Optional[str]:
    """Return a non-empty URL string or None."""
    text = _text(value)
    if text is None:
        return None
    text = text.strip()
    return text or None


def select_rank(ranks: Any) -> Optional[Dict[str, Any]]:
    """
    Pick the overall board game rank entry from a rank list.

    Priority: name "boardgame", then type "subtype", then a friendly name
    containing "board game", then the first entry.

    Args:
        ranks: A rank dict or a list of rank dicts

    Returns:
        The chosen rank dict, or None for an empty list
    """
    entries = [r for r in ensure_list(ranks) if isinstance(r, dict)]
    if not entries:
        return None
    for entry in entries:
        if entry.get("name") == "boardgame":
            return entry
    for entry in entries:
        if entry.get("type") == "subtype":
            return entry
    for entry in entries:
        if "board game" in str(entry.get("friendlyname", "")).lower():
            return entry
    return entries[0]


def parse_rank(ranks: Any) -> Optional[int]:
    """Numeric value of the selected rank, None for "Not Ranked" or junk."""
    entry = select_rank(ranks)
    if entry is None:
        return None
    value = _text(entry.get("value"))
    if value is None or value.strip() == NOT_RANKED:
        return None
    return parse_int(value)


def normalize_collection_item(item: Dict[str, Any], username: str) -> NormalizedPartial:
    """
    Normalize one item of a user's collection listing.

    Args:
        item: Raw collection item dict
        username: Owner whose collection the item came from

    Returns:
        Partial record owned by ``username``
    """
    stats = item.get("stats") if isinstance(item.get("stats"), dict) else {}
    rating = stats.get("rating") if isinstance(stats.get("rating"), dict) else {}
    ranks_node = rating.get("ranks") if isinstance(rating.get("ranks"), dict) else {}

    return NormalizedPartial(
        id=_text(item.get("objectid")),
        name=extract_name(item.get("name")),
        thumbnail=parse_url(item.get("thumbnail")),
        image=parse_url(item.get("image")),
        year_published=parse_int(item.get("yearpublished")),
        min_players=parse_int(stats.get("minplayers")),
        max_players=parse_int(stats.get("maxplayers")),
        playing_time=parse_int(stats.get("playingtime")),
        min_play_time=parse_int(stats.get("minplaytime")),
        max_play_time=parse_int(stats.get("maxplaytime")),
        rating=parse_float(rating.get("average")),
        rank=parse_rank(ranks_node.get("rank")),
        num_owned=parse_int(stats.get("numowned")),
        owners=(username,),
    )


def normalize_thing_item(item: Dict[str, Any]) -> NormalizedPartial:
    """
    Normalize one item of a thing (detail) lookup.

    Detail lookups say nothing about ownership, so owners is always empty.
    """
    statistics = item.get("statistics") if isinstance(item.get("statistics"), dict) else {}
    ratings = statistics.get("ratings") if isinstance(statistics.get("ratings"), dict) else {}
    ranks_node = ratings.get("ranks") if isinstance(ratings.get("ranks"), dict) else {}

    return NormalizedPartial(
        id=_text(item.get("id")),
        name=extract_name(item.get("name")),
        thumbnail=parse_url(item.get("thumbnail")),
        image=parse_url(item.get("image")),
        year_published=parse_int(item.get("yearpublished")),
        min_players=parse_int(item.get("minplayers")),
        max_players=parse_int(item.get("maxplayers")),
        playing_time=parse_int(item.get("playingtime")),
        min_play_time=parse_int(item.get("minplaytime")),
        max_play_time=parse_int(item.get("maxplaytime")),
        complexity=parse_float(ratings.get("averageweight")),
        rating=parse_float(ratings.get("average")),
        rank=parse_rank(ranks_node.get("rank")),
        num_owned=parse_int(ratings.get("owned")),
        owners=(),
    )


def normalize_collection(items: List[Dict[str, Any]], username: str) -> List[NormalizedPartial]:
    """Normalize every item of one user's collection."""
    return [normalize_collection_item(item, username) for item in items]
