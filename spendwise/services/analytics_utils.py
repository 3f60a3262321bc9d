from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Protocol, Sequence, Tuple

from spendwise.models import ExpenseCategory
from spendwise.services.money import safe_div

"""Aggregation helpers for a period's expenses.

Inputs are expenses already filtered to the period, with amounts in NGN.
All helpers are pure so the dashboard, the budget check and tests share the
exact same math:
    - total / count / average (zero-guarded)
    - per-category totals and the sorted category breakdown
    - daily trend for the month of a reference date
"""


class SupportsExpense(Protocol):
    amount: float
    category: ExpenseCategory
    expense_date: date


def total_spent(expenses: Iterable[SupportsExpense]) -> float:
    return sum(e.amount for e in expenses)


def average_expense(expenses: Sequence[SupportsExpense]) -> float:
    return safe_div(total_spent(expenses), len(expenses))


def totals_by_category(
    expenses: Iterable[SupportsExpense],
) -> Dict[ExpenseCategory, float]:
    """Summed amount per category; categories with no expenses are absent.

    Keys keep first-seen order.
    """
    totals: Dict[ExpenseCategory, float] = {}
    for e in expenses:
        category = ExpenseCategory(e.category)
        totals[category] = totals.get(category, 0.0) + e.amount
    return totals


def category_breakdown(
    expenses: Iterable[SupportsExpense],
) -> List[Tuple[ExpenseCategory, float]]:
    """(category, total) pairs, largest total first; ties keep first-seen order."""
    # sorted() is stable, so equal totals stay in insertion order.
    return sorted(
        totals_by_category(expenses).items(), key=lambda item: item[1], reverse=True
    )


def month_bounds(as_of: date) -> Tuple[date, date]:
    last_day = calendar.monthrange(as_of.year, as_of.month)[1]
    return as_of.replace(day=1), as_of.replace(day=last_day)


@dataclass(frozen=True)
class TrendPoint:
    day: int
    date: date
    daily_total: float
    cumulative_total: float


def daily_trend(
    expenses: Sequence[SupportsExpense], as_of: date
) -> List[TrendPoint]:
    """Per-day totals for days 1..as_of.day of as_of's month, zero-filled.

    Expenses outside that window are ignored. Returns an empty list when no
    expenses are given.
    """
    if not expenses:
        return []
    start, _ = month_bounds(as_of)
    daily = [0.0] * as_of.day
    for e in expenses:
        d = e.expense_date
        if d.year == as_of.year and d.month == as_of.month and d.day <= as_of.day:
            daily[d.day - 1] += e.amount
    points: List[TrendPoint] = []
    cumulative = 0.0
    for idx, amount in enumerate(daily):
        cumulative += amount
        points.append(
            TrendPoint(
                day=idx + 1,
                date=start.replace(day=idx + 1),
                daily_total=amount,
                cumulative_total=cumulative,
            )
        )
    return points


@dataclass(frozen=True)
class PeriodStats:
    total: float
    count: int
    average: float
    breakdown: List[Tuple[ExpenseCategory, float]]

    @property
    def categories_used(self) -> int:
        return len(self.breakdown)


def compute_period_stats(expenses: Sequence[SupportsExpense]) -> PeriodStats:
    return PeriodStats(
        total=total_spent(expenses),
        count=len(expenses),
        average=average_expense(expenses),
        breakdown=category_breakdown(expenses),
    )
