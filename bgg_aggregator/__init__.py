"""
BGG Aggregator Package - combine BoardGameGeek collections of several users.

This package provides:
1. A rate-limited, retrying client for the BGG XML API2
2. Normalization and merging of collection and thing data into one game list
3. Filtering and sorting of the merged games
"""

__version__ = "0.1.0"
__author__ = "bgg-aggregator contributors"

# Main package imports for convenience
from .api import BGGApiClient, RateLimiter
from .data import CollectionAggregator, apply_filters, fetch_aggregated_collections
from .error_handling import BGGError, FetchError
from .models import FilterState, GameData
from .logging_config import setup_logging

__all__ = [
    "BGGApiClient",
    "RateLimiter",
    "CollectionAggregator",
    "apply_filters",
    "fetch_aggregated_collections",
    "BGGError",
    "FetchError",
    "FilterState",
    "GameData",
    "setup_logging",
]
