"""Domain constants and enumerations for validation.

Currencies and categories are closed sets; persisted values use the enum
string values so stored rows and JSON backups stay readable.
"""

from enum import Enum
from typing import Dict


class Currency(str, Enum):
    NGN = "NGN"  # base
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"

    @property
    def symbol(self) -> str:
        return CURRENCY_SYMBOLS[self]

    @property
    def is_base(self) -> bool:
        return self is BASE_CURRENCY


BASE_CURRENCY = Currency.NGN

CURRENCY_SYMBOLS: Dict[Currency, str] = {
    Currency.NGN: "₦",
    Currency.USD: "$",
    Currency.EUR: "€",
    Currency.GBP: "£",
}

CURRENCY_NAMES: Dict[Currency, str] = {
    Currency.NGN: "Nigerian Naira",
    Currency.USD: "US Dollar",
    Currency.EUR: "Euro",
    Currency.GBP: "British Pound",
}


class ExpenseCategory(str, Enum):
    FOOD = "food"
    TRANSPORTATION = "transportation"
    UTILITIES = "utilities"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    HEALTHCARE = "healthcare"
    EDUCATION = "education"
    HOUSING = "housing"
    OTHER = "other"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: Dict[ExpenseCategory, str] = {
    ExpenseCategory.FOOD: "Food & Dining",
    ExpenseCategory.TRANSPORTATION: "Transportation",
    ExpenseCategory.UTILITIES: "Utilities",
    ExpenseCategory.ENTERTAINMENT: "Entertainment",
    ExpenseCategory.SHOPPING: "Shopping",
    ExpenseCategory.HEALTHCARE: "Healthcare",
    ExpenseCategory.EDUCATION: "Education",
    ExpenseCategory.HOUSING: "Housing",
    ExpenseCategory.OTHER: "Other",
}


class BudgetStatus(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    EXCEEDED = "exceeded"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"
