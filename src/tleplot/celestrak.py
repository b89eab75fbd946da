"""CelesTrak GP client for fetching current TLEs.

Queries the public CelesTrak ``gp.php`` endpoint, which needs no account.
Supported query types:

    CATNR    Catalog number (1 to 9 digits).
    INTDES   International designator (yyyy-nnn), all objects of a launch.
    GROUP    Named groups from the CelesTrak Current Data page.
    NAME     Satellite name search (partial matches).
    SPECIAL  Special data sets (GPZ, GPZ-PLUS).

CelesTrak updates GP data roughly every two hours and blocks clients that
repeat identical queries too often. Set ``TLEPLOT_CACHE_DIR`` (or pass
``cache_dir``) to reuse responses for up to two hours.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Optional

import requests

from .tle_parser import Record, parse_tles

logger = logging.getLogger(__name__)

GP_URL = "https://celestrak.org/NORAD/elements/gp.php"

QUERY_TYPES = ("CATNR", "INTDES", "GROUP", "NAME", "SPECIAL")

REQUEST_TIMEOUT = 10.0  # seconds

CACHE_MAX_AGE_HOURS = 2.0

NO_DATA_PREFIX = "No GP data found"


class CelestrakClient:
    """Client for the CelesTrak GP query API."""

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        env_cache = os.environ.get("TLEPLOT_CACHE_DIR")
        self.cache_dir = cache_dir or (Path(env_cache) if env_cache else None)
        if self.cache_dir is not None:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.timeout = timeout
        self.session = requests.Session()

    def query(self, query_type: str, value: str) -> str:
        """Fetch TLE text for a query.

        Args:
            query_type: One of ``QUERY_TYPES`` (case-insensitive).
            value: Query value, e.g. ``"25544"`` or ``"stations"``.

        Returns:
            Raw 3-line TLE text.

        Raises:
            ValueError: Unknown query type, or CelesTrak rejected the query.
            requests.RequestException: Network failure, timeout or HTTP error.
        """
        query_type = query_type.upper()
        if query_type not in QUERY_TYPES:
            raise ValueError(
                f"Unknown query type {query_type!r}; expected one of {', '.join(QUERY_TYPES)}"
            )

        cache_file = None
        if self.cache_dir is not None:
            cache_key = f"{query_type}_{value}".replace("/", "_").replace(" ", "_")[:200]
            cache_file = self.cache_dir / f"{cache_key}.tle"
            if cache_file.exists():
                age_hours = (time.time() - cache_file.stat().st_mtime) / 3600
                if age_hours < CACHE_MAX_AGE_HOURS:
                    logger.debug("Cache hit: %s", cache_file.name)
                    return cache_file.read_text()

        params = {query_type: value, "FORMAT": "tle"}
        logger.info("Querying CelesTrak: %s=%s", query_type, value)

        resp = self.session.get(GP_URL, params=params, timeout=self.timeout)
        resp.raise_for_status()

        body = resp.text
        if not is_query_valid(body):
            raise ValueError(f"Invalid query: {query_type}={value}&FORMAT=tle")

        if cache_file is not None and not body.startswith(NO_DATA_PREFIX):
            cache_file.write_text(body)

        return body

    def get_records(self, query_type: str, value: str) -> list[Record]:
        """Fetch and parse TLE records for a query."""
        raw = self.query(query_type, value)
        if not raw.strip() or raw.startswith(NO_DATA_PREFIX):
            logger.warning("No TLEs returned for %s=%s", query_type, value)
            return []
        return parse_tles(raw)


def is_query_valid(response_body: str) -> bool:
    """False if CelesTrak answered with an "Invalid query" message."""
    return not response_body.startswith("Invalid query")


def fetch(query_type: str, value: str) -> str:
    """Fetch TLE text with a one-off client."""
    return CelestrakClient().query(query_type, value)
