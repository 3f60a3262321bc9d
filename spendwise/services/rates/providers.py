from __future__ import annotations

"""Concrete rate sources and factory.

'static' always answers with the built-in default table (offline mode);
'external-http' asks exchangerate-api.com for the latest NGN-based quotes.
"""
from typing import Callable, Dict, Optional, Type

from spendwise.core.config import Settings
from spendwise.models import BASE_CURRENCY, DEFAULT_EXCHANGE_RATES, ExchangeRateTable
from spendwise.services.http_client import HttpError, get_json
from .base import RateFetchError, RateSource


class StaticRateSource(RateSource):
    def fetch_table(self) -> ExchangeRateTable:
        return DEFAULT_EXCHANGE_RATES


class ExternalHTTPRateSource(RateSource):
    """Live quotes keyed to NGN.

    The API answers `{"rates": {"USD": 0.00066, ...}}`, i.e. units of X per
    one NGN; `ExchangeRateTable.from_quote_rates` inverts that into NGN per X.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        retries: int = 1,
        fetch_json: Optional[Callable[..., Dict]] = None,
    ):
        self._url = f"{base_url.rstrip('/')}/{BASE_CURRENCY.value}"
        self._timeout = timeout
        self._retries = retries
        self._fetch_json = fetch_json or get_json

    @property
    def url(self) -> str:
        return self._url

    def fetch_table(self) -> ExchangeRateTable:
        try:
            data = self._fetch_json(
                self._url, timeout=self._timeout, retries=self._retries
            )
        except HttpError as e:
            raise RateFetchError(str(e)) from e
        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict):
            raise RateFetchError("response has no 'rates' object")
        try:
            return ExchangeRateTable.from_quote_rates(rates)
        except ValueError as e:
            raise RateFetchError(f"malformed rates payload: {e}") from e


_PROVIDER_REGISTRY: Dict[str, Type[RateSource]] = {
    "static": StaticRateSource,
    "external-http": ExternalHTTPRateSource,
}


def make_rate_source(settings: Settings) -> RateSource:
    kind = settings.exchange_rate_provider
    cls = _PROVIDER_REGISTRY.get(kind)
    if not cls:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    if cls is ExternalHTTPRateSource:
        return ExternalHTTPRateSource(
            str(settings.exchange_api_base_url),
            timeout=settings.http_timeout_seconds,
            retries=settings.http_retries,
        )
    return cls()
