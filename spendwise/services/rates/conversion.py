from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from babel import Locale, numbers

from spendwise.models import Currency, ExchangeRateTable

"""Conversion between the base currency (NGN) and a display currency.

Amounts are persisted in NGN; the display currency only affects what users
see and type. `to_base` is applied at every write, `to_display`/`format` at
every read, so a single converter instance keeps entry, editing and display
consistent for one (currency, rate table) pair.
"""


@lru_cache(maxsize=None)
def _amount_pattern(currency: Currency) -> str:
    digits = numbers.get_currency_precision(currency.value)
    fraction = "." + "0" * digits if digits else ""
    return f"{currency.symbol}#,##0{fraction}"


@dataclass(frozen=True)
class CurrencyConverter:
    currency: Currency
    rates: ExchangeRateTable
    locale: str = "en_US"

    @property
    def symbol(self) -> str:
        return self.currency.symbol

    def to_display(self, amount_base: float) -> float:
        if self.currency.is_base:
            return amount_base
        return amount_base / self.rates[self.currency]

    def to_base(self, amount_display: float) -> float:
        if self.currency.is_base:
            return amount_display
        return amount_display * self.rates[self.currency]

    def format(self, amount_base: float) -> str:
        """Render an NGN amount in the display currency, e.g. '$1,234.50'."""
        return format_amount(self.to_display(amount_base), self.currency, self.locale)

    def convert(self, amount: float, source: Currency, target: Currency) -> float:
        """Convert between two arbitrary supported currencies via NGN."""
        base = amount * self.rates[source]
        return base / self.rates[target]

    def with_currency(self, currency: Currency) -> "CurrencyConverter":
        return CurrencyConverter(currency=currency, rates=self.rates, locale=self.locale)


def format_amount(amount: float, currency: Currency, locale: str = "en_US") -> str:
    """Locale-aware grouping/decimal marks with the currency's own symbol."""
    return numbers.format_decimal(
        amount, format=_amount_pattern(currency), locale=Locale.parse(locale)
    )
