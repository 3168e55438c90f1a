"""
BGG XML API access.

This module handles:
- Rate limiting of every outgoing request
- Retry and backoff for queued, throttled and failing requests
- Parsing XML responses into plain item dicts
"""

from .client import BGGApiClient
from .rate_limiter import RateLimiter

__all__ = [
    "BGGApiClient",
    "RateLimiter",
]
