from __future__ import annotations

import json
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .constants import BASE_CURRENCY, Currency


@dataclass(frozen=True)
class ExchangeRateTable:
    """Base (NGN) units per one unit of each supported currency.

    This is the only direction stored anywhere in the application:
    `table[Currency.USD] == 1500.0` means one dollar is worth 1500 naira.
    Invariants enforced on construction: every currency present, the base rate
    is exactly 1 and all rates are positive finite numbers.
    """

    rates: Mapping[Currency, float]

    def __post_init__(self) -> None:
        normalized: Dict[Currency, float] = {}
        for key, value in dict(self.rates).items():
            currency = Currency(key)
            try:
                rate = float(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"rate for {currency.value} is not numeric") from e
            if not math.isfinite(rate) or rate <= 0:
                raise ValueError(f"rate for {currency.value} must be positive")
            normalized[currency] = rate
        missing = [c.value for c in Currency if c not in normalized]
        if missing:
            raise ValueError(f"missing rates for {', '.join(missing)}")
        if normalized[BASE_CURRENCY] != 1.0:
            raise ValueError(f"{BASE_CURRENCY.value} rate must be exactly 1")
        object.__setattr__(self, "rates", MappingProxyType(normalized))

    def __getitem__(self, currency: Currency) -> float:
        return self.rates[Currency(currency)]

    def base_per_unit(self, currency: Currency) -> float:
        return self[currency]

    @classmethod
    def from_quote_rates(cls, quote_rates: Mapping[str, Any]) -> "ExchangeRateTable":
        """Build a table from a rate source quoting "units of X per one NGN".

        The inversion happens here and nowhere else.
        """
        table: Dict[Currency, float] = {BASE_CURRENCY: 1.0}
        for currency in Currency:
            if currency is BASE_CURRENCY:
                continue
            value = quote_rates.get(currency.value)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"missing or non-numeric quote for {currency.value}")
            if value <= 0:
                raise ValueError(f"non-positive quote for {currency.value}")
            table[currency] = 1 / value
        return cls(table)

    def as_dict(self) -> Dict[str, float]:
        return {c.value: r for c, r in self.rates.items()}

    def to_json(self) -> str:
        return json.dumps(self.as_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, payload: str) -> "ExchangeRateTable":
        data = json.loads(payload)
        if not isinstance(data, dict):
            raise ValueError("cached rate table must be a JSON object")
        return cls(data)


DEFAULT_EXCHANGE_RATES = ExchangeRateTable(
    {
        Currency.NGN: 1.0,
        Currency.USD: 1500.0,
        Currency.EUR: 1650.0,
        Currency.GBP: 1900.0,
    }
)


@dataclass(frozen=True)
class RateCacheEntry:
    table: ExchangeRateTable
    fetched_at: float  # epoch seconds

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.fetched_at < ttl_seconds
