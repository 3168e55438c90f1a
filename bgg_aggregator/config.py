"""
Configuration settings for the BGG collection aggregator.
"""

import os

# Per-run log files go here unless BGG_LOG_DIR names another directory.
# A relative path resolves against the working directory.
LOG_DIR_ENV = "BGG_LOG_DIR"
DEFAULT_LOGS_DIR = "bgg_aggregator_logs"

# BGG XML API
BGG_API_BASE_URL = os.environ.get("BGG_API_BASE_URL", "https://boardgamegeek.com/xmlapi2")
REQUEST_TIMEOUT = float(os.environ.get("BGG_REQUEST_TIMEOUT", "30"))
REQUEST_HEADERS = {"Accept": "application/xml"}

# Rate limiting: BGG asks for no more than one request per second
MIN_REQUEST_INTERVAL = float(os.environ.get("BGG_MIN_REQUEST_INTERVAL", "1.0"))

# Retry policy (attempts beyond the first)
MAX_RETRIES = int(os.environ.get("BGG_MAX_RETRIES", "5"))
QUEUED_BACKOFF_STEP = 2.0   # 202: 2s, 4s, 6s, 8s, 10s
QUEUED_BACKOFF_CAP = 10.0
ERROR_BACKOFF_BASE = 1.0    # 429/5xx/network: 1s, 2s, 4s, 8s, 16s
ERROR_BACKOFF_CAP = 16.0

# The thing endpoint accepts at most 20 ids per call
DETAIL_BATCH_SIZE = 20

# Query parameters for each endpoint
COLLECTION_PARAMS = {"stats": 1, "subtype": "boardgame", "own": 1}
THING_PARAMS = {"stats": 1, "type": "boardgame"}

# Aggregation cache
CACHE_TTL = float(os.environ.get("BGG_CACHE_TTL", "300"))          # 5 minutes fresh
CACHE_MAX_AGE = float(os.environ.get("BGG_CACHE_MAX_AGE", "600"))  # 10 minutes then evicted

# Normalization constants
NOT_RANKED = "Not Ranked"
UNKNOWN_NAME = "Unknown"
UNRANKED_SORT_VALUE = 999999
