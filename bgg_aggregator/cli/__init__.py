"""
Command-line interface for the BGG aggregator package.

This module provides CLI commands for:
- Aggregating the collections of several BGG users
- Filtering and sorting the merged games
"""

from .main import main

__all__ = [
    "main",
]
