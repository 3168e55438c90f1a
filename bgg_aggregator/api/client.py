"""
Async client for the BoardGameGeek XML API2.

Every physical request goes through a shared RateLimiter. Queued (202),
rate limited (429), server error (5xx) and network failures are retried
with backoff; a 404 on a collection means the user has nothing to show.
"""

import asyncio
import logging
import xml.etree.ElementTree as ET
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import httpx

from ..config import (
    BGG_API_BASE_URL,
    COLLECTION_PARAMS,
    DETAIL_BATCH_SIZE,
    ERROR_BACKOFF_BASE,
    ERROR_BACKOFF_CAP,
    MAX_RETRIES,
    QUEUED_BACKOFF_CAP,
    QUEUED_BACKOFF_STEP,
    REQUEST_HEADERS,
    REQUEST_TIMEOUT,
    THING_PARAMS,
)
from ..error_handling import FetchError, RetryableResponseError, log_retry, parse_retry_after
from .rate_limiter import RateLimiter
from .xml_parser import parse_items

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = {202, 429}


def compute_retry_delay(attempt: int, error: Exception) -> float:
    """
    Work out how long to wait before retry number ``attempt`` (1-based).

    A Retry-After directive wins. Queued (202) responses back off linearly,
    everything else exponentially.
    """
    retry_after = getattr(error, "retry_after", None)
    if retry_after:
        return retry_after
    if getattr(error, "status_code", None) == 202:
        return min(QUEUED_BACKOFF_STEP * attempt, QUEUED_BACKOFF_CAP)
    return min(ERROR_BACKOFF_BASE * 2 ** (attempt - 1), ERROR_BACKOFF_CAP)


def chunk_ids(ids: List[str], size: int = DETAIL_BATCH_SIZE) -> List[List[str]]:
    """Split ids into consecutive chunks of at most ``size``."""
    return [ids[i:i + size] for i in range(0, len(ids), size)]


class BGGApiClient:
    """
    Rate-limited, retrying client for the collection and thing endpoints.
    """

    def __init__(self, base_url: str = BGG_API_BASE_URL,
                 rate_limiter: Optional[RateLimiter] = None,
                 http_client: Optional[httpx.AsyncClient] = None,
                 max_retries: int = MAX_RETRIES,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        """
        Initialize the API client.

        Args:
            base_url: XML API2 root URL
            rate_limiter: Limiter shared by every request (one is created if omitted)
            http_client: httpx client to send requests with (one is created if omitted)
            max_retries: Retries allowed per physical request beyond the first attempt
            sleep: Coroutine used for backoff waits
        """
        self.base_url = base_url.rstrip("/")
        self.rate_limiter = rate_limiter or RateLimiter()
        self.max_retries = max_retries
        self._sleep = sleep
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=REQUEST_TIMEOUT,
            headers=REQUEST_HEADERS,
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "BGGApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def fetch_collection(self, username: str) -> List[Dict[str, Any]]:
        """
        Fetch the owned board games in a user's collection.

        Args:
            username: BGG username

        Returns:
            List of raw collection items; empty if the user is unknown or owns nothing

        Raises:
            FetchError: On non-retryable failures or when retries run out
        """
        params = {"username": username, **COLLECTION_PARAMS}
        try:
            body = await self._get("collection", params, target=username)
        except FetchError as e:
            if e.status_code == 404:
                logger.warning(f"User \"{username}\" not found or has no collection")
                return []
            logger.error(f"Error fetching collection for {username}: {e}")
            raise

        items = self._parse(body, "collection", username)
        logger.info(f"Fetched {len(items)} collection items for {username}")
        return items

    async def fetch_details(self, ids: List[str]) -> List[Dict[str, Any]]:
        """
        Fetch thing details (including weight) for the given ids.

        Ids are requested in chunks of DETAIL_BATCH_SIZE, one chunk after the other.

        Args:
            ids: BGG ids

        Returns:
            Raw thing items from every chunk, in request order

        Raises:
            FetchError: If any chunk fails
        """
        if not ids:
            return []

        results: List[Dict[str, Any]] = []
        for chunk in chunk_ids(list(ids)):
            params = {"id": ",".join(chunk), **THING_PARAMS}
            try:
                body = await self._get("thing", params, target=chunk)
            except FetchError as e:
                logger.error(f"Error fetching thing details: {e}")
                raise
            results.extend(self._parse(body, "thing", chunk))

        logger.info(f"Fetched details for {len(results)} of {len(ids)} requested games")
        return results

    def _parse(self, body: bytes, endpoint: str, target: Union[str, List[str]]) -> List[Dict[str, Any]]:
        try:
            return parse_items(body)
        except ET.ParseError as e:
            raise FetchError(endpoint, target, f"malformed XML ({e})") from e

    async def _get(self, endpoint: str, params: Dict[str, Any],
                   target: Union[str, List[str]]) -> bytes:
        """
        GET an endpoint through the rate limiter, retrying retryable failures.

        Returns:
            Response body of the first successful (200) response
        """
        url = f"{self.base_url}/{endpoint}"
        attempt = 0
        while True:
            try:
                return await self.rate_limiter.throttle(lambda: self._send(url, params))
            except (RetryableResponseError, httpx.TransportError) as e:
                status = getattr(e, "status_code", None)
                if attempt >= self.max_retries:
                    logger.error(f"Giving up on {url} after {attempt + 1} attempts: {e}")
                    raise FetchError(endpoint, target, f"retries exhausted ({e})",
                                     status_code=status, attempts=attempt + 1) from e
                attempt += 1
                delay = compute_retry_delay(attempt, e)
                log_retry(attempt, url, delay, e)
                await self._sleep(delay)
            except httpx.HTTPStatusError as e:
                raise FetchError(endpoint, target, f"HTTP {e.response.status_code}",
                                 status_code=e.response.status_code, attempts=attempt + 1) from e

    async def _send(self, url: str, params: Dict[str, Any]) -> bytes:
        """Send one physical request and classify the response."""
        response = await self._http.get(url, params=params)
        status = response.status_code
        if status in RETRYABLE_STATUSES or status >= 500:
            if status == 202:
                logger.info(f"BGG request queued (202) for {url}")
            raise RetryableResponseError(
                status, url, retry_after=parse_retry_after(response.headers.get("Retry-After"))
            )
        response.raise_for_status()
        return response.content
