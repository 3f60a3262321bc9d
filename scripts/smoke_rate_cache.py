"""Smoke script for the persistent rate cache.

Demonstrates:
 1. First access with an empty store fetches from the configured source.
 2. A second access inside the freshness window is served from the cache.
 3. Advancing the clock past the TTL with a failing source falls back to the
    stale cached table without rewriting the store.

Uses an in-memory store and a controllable clock, so it never touches the
real database. Set SPENDWISE_EXCHANGE_RATE_PROVIDER=static to stay offline.

NOTE: This is a lightweight diagnostic and not a formal test.
"""

from pprint import pprint

from spendwise.core.config import get_settings
from spendwise.services.rates.base import RateFetchError, RateSource
from spendwise.services.rates.cache_service import RateProvider
from spendwise.services.rates.providers import make_rate_source
from spendwise.services.storage import InMemoryKeyValueStore


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _Switchable(RateSource):
    def __init__(self, inner: RateSource) -> None:
        self.inner = inner
        self.down = False

    def fetch_table(self):
        if self.down:
            raise RateFetchError("simulated outage")
        return self.inner.fetch_table()


def run():
    settings = get_settings()
    clock = _Clock()
    source = _Switchable(make_rate_source(settings))
    store = InMemoryKeyValueStore()
    provider = RateProvider(
        source, store, ttl_seconds=settings.rates_cache_ttl_seconds, clock=clock
    )
    out = {}

    def snapshot(label):
        table = provider.get_rates()
        info = provider.cache_info()
        out[label] = {
            "rates": table.as_dict(),
            "source": info.last_source,
            "cached_at": info.cached_at,
            "is_fresh": info.is_fresh,
        }

    snapshot("initial")
    clock.now += 60
    snapshot("within_ttl")
    clock.now += settings.rates_cache_ttl_seconds
    source.down = True
    snapshot("stale_fallback")

    pprint(out)


if __name__ == "__main__":
    run()
