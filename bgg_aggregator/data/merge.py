"""
Merging of partial game records into one GameData per BGG id.

Every field follows the same rule: a later value wins only if it is set.
The name is stricter: only a real name (non-empty, not the "Unknown"
placeholder) replaces the one already held.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence

from ..config import UNKNOWN_NAME
from ..models import GAME_FIELDS, GameData, NormalizedPartial
from .normalize import extract_name

logger = logging.getLogger(__name__)

# Fields merged with plain coalesce; id, name and owners have their own rules
VALUE_FIELDS = tuple(f for f in GAME_FIELDS if f not in ("id", "name"))


def coalesce(current: Any, incoming: Any) -> Any:
    """Return incoming unless it is unset (None), else current."""
    return current if incoming is None else incoming


def is_real_name(name: Any) -> bool:
    """True for a non-empty string that is not the placeholder name."""
    return isinstance(name, str) and bool(name.strip()) and name != UNKNOWN_NAME


def coalesce_name(current: Any, incoming: Any) -> str:
    """
    Merge two names, never letting a missing or placeholder name win.

    Args:
        current: Name held so far (any shape extract_name understands)
        incoming: Name from the record being folded in

    Returns:
        The incoming name if it is real, otherwise the current name
    """
    if is_real_name(incoming):
        return incoming
    return extract_name(current)


def union_owners(current: Sequence[str], incoming: Sequence[str]) -> List[str]:
    """Ordered union of two owner lists, first appearance wins."""
    owners = list(current)
    for username in incoming:
        if username not in owners:
            owners.append(username)
    return owners


def _merged_values(current: Any, incoming: NormalizedPartial) -> Dict[str, Any]:
    values = {f: coalesce(getattr(current, f), getattr(incoming, f)) for f in VALUE_FIELDS}
    values["name"] = coalesce_name(current.name, incoming.name)
    return values


def fold_partial(base: NormalizedPartial, details: NormalizedPartial) -> NormalizedPartial:
    """
    Fold a detail partial into a collection partial for the same id.

    Detail values only fill fields the collection left unset, except the
    name: a real detail name replaces the collection one. The base keeps
    its owners.
    """
    values = {f: coalesce(getattr(details, f), getattr(base, f)) for f in VALUE_FIELDS}
    values["name"] = coalesce_name(base.name, details.name)
    return replace(base, **values)


def _seed(partial: NormalizedPartial) -> GameData:
    values = {f: getattr(partial, f) for f in VALUE_FIELDS}
    return GameData(
        id=partial.id,
        name=extract_name(partial.name),
        owners=union_owners([], partial.owners),
        **values,
    )


def merge_game_data(partials: Sequence[NormalizedPartial]) -> List[GameData]:
    """
    Merge partial records into one GameData per id.

    Partials without an id are dropped. Output keeps the order in which
    ids were first seen.

    Args:
        partials: Normalized partials in processing order

    Returns:
        Merged games
    """
    games: Dict[str, GameData] = {}
    dropped = 0

    for partial in partials:
        if not partial.id:
            dropped += 1
            continue

        existing: Optional[GameData] = games.get(partial.id)
        if existing is None:
            games[partial.id] = _seed(partial)
            continue

        for key, value in _merged_values(existing, partial).items():
            setattr(existing, key, value)
        existing.owners = union_owners(existing.owners, partial.owners)

    if dropped:
        logger.debug(f"Dropped {dropped} partial records without an id")
    logger.debug(f"Merged {len(partials)} partial records into {len(games)} games")
    return list(games.values())
