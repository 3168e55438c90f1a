"""
Error types and retry logging for the BGG aggregator package.
"""

import logging
from typing import List, Optional, Union

logger = logging.getLogger(__name__)


class BGGError(Exception):
    """Base class for all aggregator errors."""


class RetryableResponseError(BGGError):
    """
    A single request attempt got a response that should be retried.

    Raised for 202 (queued), 429 (rate limited) and 5xx responses.
    """

    def __init__(self, status_code: int, url: str, retry_after: Optional[float] = None):
        self.status_code = status_code
        self.url = url
        self.retry_after = retry_after
        super().__init__(f"HTTP {status_code} from {url}")


class FetchError(BGGError):
    """
    A fetch against the BGG API failed for good.

    Args:
        endpoint: API endpoint name ("collection" or "thing")
        target: Username or list of ids the request was for
        message: Short reason
        status_code: Last HTTP status seen, if any
        attempts: Number of physical requests made
    """

    def __init__(self, endpoint: str, target: Union[str, List[str]], message: str,
                 status_code: Optional[int] = None, attempts: int = 1):
        self.endpoint = endpoint
        self.target = target
        self.status_code = status_code
        self.attempts = attempts
        if isinstance(target, str):
            target_desc = f"user '{target}'"
        else:
            target_desc = f"ids {','.join(target)}"
        super().__init__(f"Failed to fetch {endpoint} for {target_desc}: {message}")


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """
    Parse a Retry-After header given in seconds.

    Returns:
        Positive number of seconds, or None if missing or unusable
    """
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if seconds > 0 else None


def log_retry(attempt: int, url: str, delay: float, error: Exception) -> None:
    """Log a retry attempt, calling out BGG's queued (202) responses."""
    status = getattr(error, "status_code", None)
    if status == 202:
        logger.warning(
            f"Retry attempt {attempt} for {url} in {delay:.1f}s. "
            f"Request was queued (202), waiting for processing..."
        )
    else:
        logger.warning(f"Retry attempt {attempt} for {url} in {delay:.1f}s. Reason: {status or error}")
