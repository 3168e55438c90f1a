"""
Filtering and sorting of merged games.

All functions here are pure: they never modify the games or the filter
state they are given and always return new lists.
"""

from typing import Any, Callable, Dict, List, Sequence

from ..config import UNRANKED_SORT_VALUE
from ..models import FilterState, GameData, SortKey, SortOrder


def _first_set(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _matches(game: GameData, filters: FilterState) -> bool:
    if filters.player_count is not None:
        min_players = game.min_players if game.min_players is not None else 0
        max_players = game.max_players if game.max_players is not None else 999
        if not min_players <= filters.player_count <= max_players:
            return False

    if filters.min_play_time is not None:
        play_time = _first_set(game.max_play_time, game.playing_time, 0)
        if play_time < filters.min_play_time:
            return False

    if filters.max_play_time is not None:
        play_time = _first_set(game.min_play_time, game.playing_time, 999)
        if play_time > filters.max_play_time:
            return False

    complexity = game.complexity or 0
    if filters.min_complexity is not None and complexity < filters.min_complexity:
        return False
    if filters.max_complexity is not None and complexity > filters.max_complexity:
        return False

    if filters.min_rating is not None and (game.rating or 0) < filters.min_rating:
        return False

    if filters.search and filters.search.lower() not in game.name.lower():
        return False

    return True


def filter_games(games: Sequence[GameData], filters: FilterState) -> List[GameData]:
    """
    Keep the games that satisfy every filter that is set.

    Args:
        games: Merged games
        filters: Filter state; unset fields do not constrain

    Returns:
        Matching games in their original order
    """
    return [game for game in games if _matches(game, filters)]


SORT_KEYS: Dict[str, Callable[[GameData], Any]] = {
    "name": lambda g: str(g.name or "").lower(),
    "rating": lambda g: g.rating or 0,
    "rank": lambda g: g.rank if g.rank is not None else UNRANKED_SORT_VALUE,
    "complexity": lambda g: g.complexity or 0,
    "playingTime": lambda g: g.playing_time or 0,
    "owners": lambda g: len(g.owners),
}


def sort_games(games: Sequence[GameData], sort_by: SortKey = "name",
               sort_order: SortOrder = "asc") -> List[GameData]:
    """
    Sort games by one key. Ties keep their original relative order.

    Unranked games always go last when sorting by rank, in either direction.

    Args:
        games: Games to sort
        sort_by: One of name, rating, rank, complexity, playingTime, owners
        sort_order: "asc" or "desc"

    Returns:
        New sorted list
    """
    key = SORT_KEYS.get(sort_by)
    if key is None:
        raise ValueError(f"Unknown sort key: {sort_by}")
    reverse = sort_order == "desc"

    if sort_by == "rank":
        ranked = [g for g in games if g.rank is not None]
        unranked = [g for g in games if g.rank is None]
        return sorted(ranked, key=key, reverse=reverse) + unranked

    return sorted(games, key=key, reverse=reverse)


def apply_filters(games: Sequence[GameData], filters: FilterState) -> List[GameData]:
    """Filter, then sort by the filter state's sort key and order."""
    return sort_games(filter_games(games, filters), filters.sort_by, filters.sort_order)
