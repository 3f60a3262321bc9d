from __future__ import annotations

"""Rate source abstraction.

A rate source performs one fetch of a complete table. Caching, freshness and
fallback live in `cache_service.RateProvider`, so sources stay trivial to
fake in tests.
"""
from abc import ABC, abstractmethod
from typing import Protocol

from spendwise.models import ExchangeRateTable


class RateFetchError(Exception):
    """The source could not produce a valid table (network or payload)."""


class RateSource(ABC):
    @abstractmethod
    def fetch_table(self) -> ExchangeRateTable:
        """Return a fresh table or raise RateFetchError."""
        raise NotImplementedError


class SupportsGetRates(Protocol):
    def get_rates(self) -> ExchangeRateTable: ...
