from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from spendwise.models import DEFAULT_EXCHANGE_RATES, ExchangeRateTable, RateCacheEntry
from spendwise.services.http_client import HttpError
from spendwise.services.storage import KeyValueStore, StorageError
from .base import RateFetchError, RateSource

"""Persistent rate cache with freshness window and fallback chain.

Lookup order for `get_rates()`:
    1. cached table, when fetched less than `ttl_seconds` ago (no network)
    2. live fetch from the configured source; success is written back to the
       store as the serialized table plus an epoch-seconds timestamp
    3. on fetch failure, the last cached table regardless of age
    4. the built-in default table

The provider never raises for fetch or cache problems (including store
errors, which read as an empty cache) and never writes the
store on a fallback path. It has no scheduler of its own; callers re-invoke
it on their refresh interval.
"""

RATES_CACHE_KEY = "spendwise_exchange_rates"
RATES_CACHE_TIMESTAMP_KEY = "spendwise_rates_timestamp"

SOURCE_CACHE = "cache"
SOURCE_NETWORK = "network"
SOURCE_STALE_CACHE = "stale-cache"
SOURCE_DEFAULTS = "defaults"

logger = logging.getLogger("spendwise.rates")


@dataclass(frozen=True)
class RateCacheInfo:
    cached_at: Optional[float]
    is_fresh: bool
    ttl_seconds: float
    last_source: Optional[str]


class RateProvider:
    def __init__(
        self,
        source: RateSource,
        store: KeyValueStore,
        *,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self._source = source
        self._store = store
        self._ttl = ttl_seconds
        self._clock = clock
        # Serializes fetches so racing callers reuse the freshly written cache.
        self._lock = threading.Lock()
        self._last_source: Optional[str] = None

    # Internal --------------------------------------------------
    def _read_raw(self, key: str) -> Optional[str]:
        try:
            return self._store.get(key)
        except StorageError as e:
            logger.warning("rate cache unreadable", extra={"key": key, "error": str(e)})
            return None

    def _read_cached_table(self) -> Optional[ExchangeRateTable]:
        raw = self._read_raw(RATES_CACHE_KEY)
        if raw is None:
            return None
        try:
            return ExchangeRateTable.from_json(raw)
        except ValueError as e:  # JSONDecodeError is a ValueError
            logger.warning("ignoring corrupt cached rates", extra={"error": str(e)})
            return None

    def _read_cached_timestamp(self) -> Optional[float]:
        raw = self._read_raw(RATES_CACHE_TIMESTAMP_KEY)
        if raw is None:
            return None
        try:
            ts = float(raw)
        except ValueError:
            return None
        return ts if math.isfinite(ts) else None

    def _read_cache(self) -> Optional[RateCacheEntry]:
        table = self._read_cached_table()
        ts = self._read_cached_timestamp()
        if table is None or ts is None:
            return None
        return RateCacheEntry(table=table, fetched_at=ts)

    def _fresh_entry(self) -> Optional[RateCacheEntry]:
        entry = self._read_cache()
        if entry and entry.is_fresh(self._clock(), self._ttl):
            return entry
        return None

    def _fetch_and_store(self) -> ExchangeRateTable:
        try:
            table = self._source.fetch_table()
        except (RateFetchError, HttpError, OSError, ValueError) as e:
            return self._fallback(e)
        now = self._clock()
        # Table first: a failed timestamp write can only make the new table look
        # older, never an old table look fresh.
        try:
            self._store.set(RATES_CACHE_KEY, table.to_json())
            self._store.set(RATES_CACHE_TIMESTAMP_KEY, repr(now))
        except StorageError as e:
            logger.warning("could not cache fetched rates", extra={"error": str(e)})
        self._last_source = SOURCE_NETWORK
        logger.info("exchange rates refreshed", extra={"rates": table.as_dict()})
        return table

    def _fallback(self, error: Exception) -> ExchangeRateTable:
        cached = self._read_cached_table()
        if cached is not None:
            self._last_source = SOURCE_STALE_CACHE
            logger.warning(
                "rate fetch failed; using cached rates",
                extra={"error": str(error)},
            )
            return cached
        self._last_source = SOURCE_DEFAULTS
        logger.warning(
            "rate fetch failed; using default rates", extra={"error": str(error)}
        )
        return DEFAULT_EXCHANGE_RATES

    # Public API -----------------------------------------------
    def get_rates(self) -> ExchangeRateTable:
        entry = self._fresh_entry()
        if entry:
            self._last_source = SOURCE_CACHE
            return entry.table
        with self._lock:
            # Another caller may have refreshed while we waited.
            entry = self._fresh_entry()
            if entry:
                self._last_source = SOURCE_CACHE
                return entry.table
            return self._fetch_and_store()

    def refresh(self) -> ExchangeRateTable:
        """Attempt a live fetch now, ignoring freshness."""
        with self._lock:
            return self._fetch_and_store()

    def cache_info(self) -> RateCacheInfo:
        ts = self._read_cached_timestamp()
        return RateCacheInfo(
            cached_at=ts,
            is_fresh=self._fresh_entry() is not None,
            ttl_seconds=self._ttl,
            last_source=self._last_source,
        )
