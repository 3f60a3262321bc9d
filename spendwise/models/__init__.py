"""Pydantic domain models and value objects for SpendWise."""

from .constants import (
    BASE_CURRENCY,
    CATEGORY_LABELS,
    CURRENCY_NAMES,
    CURRENCY_SYMBOLS,
    BudgetStatus,
    Currency,
    ExpenseCategory,
    Theme,
)  # re-export
from .expense import ExpenseIn, ExpenseOut, ExpenseRecord, ExpenseUpdateIn, ExpenseView
from .budget import BudgetProgress, BudgetUpdateIn
from .preferences import PreferencesUpdateIn, UserPreferences
from .rates import DEFAULT_EXCHANGE_RATES, ExchangeRateTable, RateCacheEntry

__all__ = [
    "BASE_CURRENCY",
    "CATEGORY_LABELS",
    "CURRENCY_NAMES",
    "CURRENCY_SYMBOLS",
    "BudgetStatus",
    "Currency",
    "ExpenseCategory",
    "Theme",
    "ExpenseIn",
    "ExpenseOut",
    "ExpenseRecord",
    "ExpenseUpdateIn",
    "ExpenseView",
    "BudgetProgress",
    "BudgetUpdateIn",
    "PreferencesUpdateIn",
    "UserPreferences",
    "DEFAULT_EXCHANGE_RATES",
    "ExchangeRateTable",
    "RateCacheEntry",
]
