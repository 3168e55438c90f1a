"""
Game data processing for aggregated BGG collections.

This module handles:
- Normalizing collection and thing items into one record shape
- Merging records across sources and users
- Filtering and sorting merged games
- The cached aggregation flow
"""

from .aggregator import CollectionAggregator, fetch_aggregated_collections, fetch_user_collection
from .filtering import apply_filters, filter_games, sort_games
from .merge import merge_game_data
from .normalize import normalize_collection_item, normalize_thing_item
from ..models import FilterState, GameData, NormalizedPartial

__all__ = [
    "CollectionAggregator",
    "fetch_aggregated_collections",
    "fetch_user_collection",
    "apply_filters",
    "filter_games",
    "sort_games",
    "merge_game_data",
    "normalize_collection_item",
    "normalize_thing_item",
    "FilterState",
    "GameData",
    "NormalizedPartial",
]
