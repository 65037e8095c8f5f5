"""NASA NeoWs feed client: fetches raw close-approach records for a date window."""

from __future__ import annotations

import logging
import random
import time
from datetime import date, timedelta
from typing import Any

import httpx

from neo_assessment.config import Settings

logger = logging.getLogger(__name__)

NEOWS_BASE = "https://api.nasa.gov/neo/rest/v1"
FEED_URL = f"{NEOWS_BASE}/feed"

# NeoWs rejects feed windows longer than 7 days
MAX_WINDOW_DAYS = 7

RANGE_DAYS = {"day": 1, "week": 7, "month": MAX_WINDOW_DAYS}


class FeedError(RuntimeError):
    """The NeoWs feed could not be fetched or decoded."""


def feed_window(range_name: str = "week", today: date | None = None) -> tuple[str, str]:
    """Return (start, end) ISO dates for a named range, capped at the NeoWs maximum."""
    start = today or date.today()
    days = RANGE_DAYS.get(range_name, MAX_WINDOW_DAYS)
    end = start + timedelta(days=days)
    return start.isoformat(), end.isoformat()


def flatten_feed(payload: Any) -> list[dict]:
    """Flatten ``near_earth_objects`` (date → records) into one list, ordered by date."""
    if not isinstance(payload, dict):
        raise FeedError(f"Feed payload is a {type(payload).__name__}, expected an object")
    by_date = payload.get("near_earth_objects")
    if not isinstance(by_date, dict):
        raise FeedError("Feed payload has no 'near_earth_objects' mapping")
    records: list[dict] = []
    for day in sorted(by_date):
        records.extend(by_date[day] or [])
    return records


class NeoFeedClient:
    """Caching NeoWs client. One cached payload per (start, end) window."""

    def __init__(self, settings: Settings | None = None, transport: httpx.BaseTransport | None = None):
        self.settings = settings or Settings()
        self._client = httpx.Client(timeout=self.settings.feed_timeout_s, transport=transport)
        self._cache: dict[tuple[str, str], tuple[float, list[dict]]] = {}

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "NeoFeedClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch_feed(self, start_date: str, end_date: str) -> list[dict]:
        """Fetch all raw NEO records approaching between the two dates."""
        key = (start_date, end_date)
        now = time.time()
        cached = self._cache.get(key)
        if cached and (now - cached[0]) < self.settings.feed_cache_ttl_s:
            logger.info("Using cached NEO feed %s..%s (%.0fs old).", start_date, end_date, now - cached[0])
            return cached[1]

        logger.info("Fetching NEO feed %s..%s", start_date, end_date)
        try:
            resp = self._client.get(
                FEED_URL,
                params={
                    "start_date": start_date,
                    "end_date": end_date,
                    "api_key": self.settings.nasa_api_key,
                },
            )
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as exc:
            raise FeedError(f"NeoWs returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise FeedError(f"NeoWs request failed: {exc}") from exc
        except ValueError as exc:
            raise FeedError("NeoWs returned invalid JSON") from exc

        records = flatten_feed(payload)
        self._cache[key] = (now, records)
        logger.info("Fetched %d NEO records.", len(records))
        return records


# --- Offline fallback ---

def generate_mock_records(count: int = 15, seed: int = 42, today: date | None = None) -> list[dict]:
    """
    Generate raw feed records for offline use.

    Records use the same shape as NeoWs (numeric leaves as strings) and go
    through the normal pipeline.  A fixed seed gives the same batch each run.
    """
    rng = random.Random(seed)
    start = today or date.today()
    records: list[dict] = []
    for i in range(count):
        size_km = 0.1 + rng.random() * 2.0
        velocity = 5 + rng.random() * 30
        miss_distance = 0.01 + rng.random() * 0.5
        approach = start + timedelta(days=rng.randrange(MAX_WINDOW_DAYS))
        records.append({
            "id": f"mock-{i + 1}",
            "name": f"Mock Asteroid {i + 1}",
            "estimated_diameter": {
                "meters": {
                    "estimated_diameter_min": size_km * 800,
                    "estimated_diameter_max": size_km * 1000,
                },
            },
            "close_approach_data": [{
                "close_approach_date": approach.isoformat(),
                "relative_velocity": {"kilometers_per_second": repr(velocity)},
                "miss_distance": {"astronomical": repr(miss_distance)},
            }],
            "is_potentially_hazardous_asteroid": rng.random() < 0.2,
            "orbital_data": {
                "eccentricity": repr(0.1 + rng.random() * 0.8),
                "inclination": repr(rng.random() * 30),
                "semi_major_axis": repr(1 + rng.random() * 2),
            },
        })
    return records


def load_records(client: NeoFeedClient, start_date: str, end_date: str) -> list[dict]:
    """Fetch the feed, falling back to mock records only when the settings allow it."""
    try:
        return client.fetch_feed(start_date, end_date)
    except FeedError as exc:
        if not client.settings.use_mock_fallback:
            raise
        logger.warning("NEO feed unavailable (%s); using generated mock records.", exc)
        return generate_mock_records()


# Singleton
_client: NeoFeedClient | None = None


def get_client() -> NeoFeedClient:
    global _client
    if _client is None:
        from neo_assessment.config import get_settings
        _client = NeoFeedClient(get_settings())
    return _client
