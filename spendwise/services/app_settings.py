"""User preferences backed by the key-value store.

Typed accessors with resilient reads: a missing or invalid stored value falls
back to the default instead of failing the request.

Keys:
  - spendwise_currency: display currency code (NGN | USD | EUR | GBP)
  - spendwise_theme: light | dark | system
  - spendwise_monthly_budget: float, NGN, 0 disables tracking
  - spendwise_preferences: JSON object {"showTrendChart": bool}
"""

from __future__ import annotations
from typing import Any, Dict
import json
import math

from spendwise.models import (
    BASE_CURRENCY,
    Currency,
    PreferencesUpdateIn,
    Theme,
    UserPreferences,
)
from spendwise.services.storage import KeyValueStore

CURRENCY_KEY = "spendwise_currency"
THEME_KEY = "spendwise_theme"
MONTHLY_BUDGET_KEY = "spendwise_monthly_budget"
PREFERENCES_KEY = "spendwise_preferences"

# ------------- Low level helpers -----------------


def _get_json_obj(store: KeyValueStore, key: str) -> Dict[str, Any]:
    val = store.get(key)
    if not val:
        return {}
    try:
        obj = json.loads(val)
    except ValueError:
        return {}
    return obj if isinstance(obj, dict) else {}


def _set_json_obj(store: KeyValueStore, key: str, obj: Dict[str, Any]) -> None:
    store.set(key, json.dumps(obj, separators=(",", ":")))


# ------------- Currency --------------------------


def get_currency(store: KeyValueStore) -> Currency:
    val = store.get(CURRENCY_KEY)
    try:
        return Currency(val) if val else BASE_CURRENCY
    except ValueError:
        return BASE_CURRENCY


def set_currency(store: KeyValueStore, currency: Currency) -> None:
    store.set(CURRENCY_KEY, Currency(currency).value)


# ------------- Budget ----------------------------


def get_monthly_budget(store: KeyValueStore) -> float:
    val = store.get(MONTHLY_BUDGET_KEY)
    if val is None:
        return 0.0
    try:
        amount = float(val)
    except ValueError:
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def set_monthly_budget(store: KeyValueStore, amount: float) -> None:
    if not math.isfinite(amount) or amount < 0:
        raise ValueError("Monthly budget cannot be negative")
    store.set(MONTHLY_BUDGET_KEY, repr(float(amount)))


# ------------- UI presentation -------------------


def get_theme(store: KeyValueStore) -> Theme:
    val = store.get(THEME_KEY)
    try:
        return Theme(val) if val else Theme.SYSTEM
    except ValueError:
        return Theme.SYSTEM


def set_theme(store: KeyValueStore, theme: Theme) -> None:
    store.set(THEME_KEY, Theme(theme).value)


def get_show_trend_chart(store: KeyValueStore) -> bool:
    val = _get_json_obj(store, PREFERENCES_KEY).get("showTrendChart")
    return val if isinstance(val, bool) else True


def set_show_trend_chart(store: KeyValueStore, show: bool) -> None:
    # keep any other keys an older client may have written
    prefs = _get_json_obj(store, PREFERENCES_KEY)
    prefs["showTrendChart"] = bool(show)
    _set_json_obj(store, PREFERENCES_KEY, prefs)


# ------------- Aggregate -------------------------


def load_preferences(store: KeyValueStore) -> UserPreferences:
    return UserPreferences(
        currency=get_currency(store),
        theme=get_theme(store),
        monthly_budget=get_monthly_budget(store),
        show_trend_chart=get_show_trend_chart(store),
    )


def update_preferences(
    store: KeyValueStore, update: PreferencesUpdateIn
) -> UserPreferences:
    if update.currency is not None:
        set_currency(store, update.currency)
    if update.theme is not None:
        set_theme(store, update.theme)
    if update.monthly_budget is not None:
        set_monthly_budget(store, update.monthly_budget)
    if update.show_trend_chart is not None:
        set_show_trend_chart(store, update.show_trend_chart)
    return load_preferences(store)


__all__ = [
    "get_currency",
    "set_currency",
    "get_monthly_budget",
    "set_monthly_budget",
    "get_theme",
    "set_theme",
    "get_show_trend_chart",
    "set_show_trend_chart",
    "load_preferences",
    "update_preferences",
]
