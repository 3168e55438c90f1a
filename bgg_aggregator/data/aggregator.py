"""
Aggregation of several users' collections into one merged game list.

The flow is:
1. Fetch every user's collection concurrently (requests still go out one
   per second through the client's rate limiter)
2. Normalize each item, tagged with its owner
3. Fetch thing details for ids that have no complexity yet, in chunks
4. Fold details into the collection records and merge across users
"""

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..api.client import BGGApiClient
from ..config import CACHE_MAX_AGE, CACHE_TTL
from ..models import GameData, NormalizedPartial
from .merge import fold_partial, merge_game_data
from .normalize import normalize_collection, normalize_thing_item

logger = logging.getLogger(__name__)


def clean_usernames(usernames: Iterable[str]) -> Tuple[str, ...]:
    """Trim usernames, drop blanks and duplicates, keep first-seen order."""
    cleaned: List[str] = []
    for username in usernames:
        username = (username or "").strip()
        if username and username not in cleaned:
            cleaned.append(username)
    return tuple(cleaned)


async def fetch_user_collection(client: BGGApiClient, username: str) -> List[NormalizedPartial]:
    """
    Fetch and normalize a single user's collection.

    Args:
        client: API client
        username: BGG username

    Returns:
        One partial per collection item, all owned by ``username``
    """
    items = await client.fetch_collection(username)
    return normalize_collection(items, username)


async def _fold_in_details(client: BGGApiClient,
                           partials: List[NormalizedPartial]) -> List[NormalizedPartial]:
    ids_needing_details: List[str] = []
    for partial in partials:
        if partial.complexity is None and partial.id and partial.id not in ids_needing_details:
            ids_needing_details.append(partial.id)

    if not ids_needing_details:
        return partials

    logger.info(f"Fetching details for {len(ids_needing_details)} games missing complexity")
    things = await client.fetch_details(ids_needing_details)
    details: Dict[str, NormalizedPartial] = {}
    for thing in things:
        detail = normalize_thing_item(thing)
        if detail.id:
            details[detail.id] = detail

    return [fold_partial(p, details[p.id]) if p.id in details else p for p in partials]


async def fetch_aggregated_collections(client: BGGApiClient,
                                       usernames: Iterable[str]) -> List[GameData]:
    """
    Fetch, normalize and merge the collections of several users.

    Args:
        client: API client (its rate limiter paces every request)
        usernames: BGG usernames

    Returns:
        One GameData per distinct game, in first-seen order

    Raises:
        FetchError: If any collection or detail fetch fails
    """
    usernames = clean_usernames(usernames)
    if not usernames:
        return []

    logger.info(f"Aggregating collections for {len(usernames)} users: {', '.join(usernames)}")
    collections = await asyncio.gather(
        *(fetch_user_collection(client, username) for username in usernames)
    )

    partials = [partial for collection in collections for partial in collection]
    partials = await _fold_in_details(client, partials)

    games = merge_game_data(partials)
    logger.info(f"Aggregated {len(partials)} collection entries into {len(games)} games")
    return games


def _copy_games(games: List[GameData]) -> List[GameData]:
    return [replace(game, owners=list(game.owners)) for game in games]


@dataclass
class CacheEntry:
    """Merged games for one username set and when they were fetched."""
    games: List[GameData]
    fetched_at: float


class CollectionAggregator:
    """
    Cached access to aggregated collections, keyed by username set.

    Entries are fresh for ``ttl`` seconds; a stale entry is refetched on the
    next request. Entries older than ``max_age`` are dropped.
    """

    def __init__(self, client: Optional[BGGApiClient] = None, ttl: float = CACHE_TTL,
                 max_age: float = CACHE_MAX_AGE, clock: Callable[[], float] = time.monotonic):
        """
        Initialize the aggregator.

        Args:
            client: API client shared by every fetch (one is created if omitted)
            ttl: Seconds an entry stays fresh
            max_age: Seconds after which an entry is evicted
            clock: Monotonic clock in seconds
        """
        self.client = client or BGGApiClient()
        self.ttl = ttl
        self.max_age = max_age
        self._clock = clock
        self._cache: Dict[Tuple[str, ...], CacheEntry] = {}
        self._in_flight: Dict[Tuple[str, ...], asyncio.Task] = {}

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "CollectionAggregator":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def is_fresh(self, usernames: Iterable[str]) -> bool:
        """Whether a fresh cached result exists for these usernames."""
        entry = self._cache.get(clean_usernames(usernames))
        return entry is not None and self._clock() - entry.fetched_at < self.ttl

    def invalidate(self, usernames: Optional[Iterable[str]] = None) -> None:
        """Drop one cached entry, or all of them."""
        if usernames is None:
            self._cache.clear()
        else:
            self._cache.pop(clean_usernames(usernames), None)

    async def get_games(self, usernames: Iterable[str]) -> List[GameData]:
        """
        Return merged games, from cache when fresh.

        Returns:
            A copy of the merged games the caller is free to modify
        """
        key = clean_usernames(usernames)
        if not key:
            return []

        self._evict_expired()
        entry = self._cache.get(key)
        if entry is not None and self._clock() - entry.fetched_at < self.ttl:
            logger.debug(f"Using cached collections for {', '.join(key)}")
            return _copy_games(entry.games)

        return _copy_games(await self._fetch(key))

    async def refresh(self, usernames: Iterable[str]) -> List[GameData]:
        """Refetch regardless of freshness (requests are still rate limited)."""
        key = clean_usernames(usernames)
        if not key:
            return []
        logger.info(f"Refreshing collections for {', '.join(key)}")
        self._cache.pop(key, None)
        return _copy_games(await self._fetch(key, force=True))

    async def _fetch(self, key: Tuple[str, ...], force: bool = False) -> List[GameData]:
        # Concurrent requests for the same username set share one fetch;
        # a forced fetch always starts a new one and supersedes the old
        task = self._in_flight.get(key)
        if task is None or force:
            task = asyncio.ensure_future(self._fetch_and_store(key))
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        return await asyncio.shield(task)

    async def _fetch_and_store(self, key: Tuple[str, ...]) -> List[GameData]:
        games = await fetch_aggregated_collections(self.client, key)
        # A superseded fetch still answers its callers but must not
        # overwrite the cache
        if self._in_flight.get(key) is asyncio.current_task():
            self._cache[key] = CacheEntry(games=games, fetched_at=self._clock())
        return games

    def _forget(self, key: Tuple[str, ...], task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [key for key, entry in self._cache.items() if now - entry.fetched_at >= self.max_age]
        for key in expired:
            del self._cache[key]
