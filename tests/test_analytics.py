from dataclasses import dataclass
from datetime import date

from spendwise.models import ExpenseCategory
from spendwise.services.analytics_utils import (
    average_expense,
    category_breakdown,
    compute_period_stats,
    daily_trend,
    month_bounds,
    total_spent,
)

FOOD = ExpenseCategory.FOOD
TRANSPORT = ExpenseCategory.TRANSPORTATION
SHOPPING = ExpenseCategory.SHOPPING


@dataclass
class E:
    amount: float
    category: ExpenseCategory
    expense_date: date = date(2024, 3, 1)


def test_totals_and_average():
    expenses = [E(100, FOOD), E(50, FOOD), E(30, TRANSPORT)]
    assert total_spent(expenses) == 180
    assert average_expense(expenses) == 60
    assert category_breakdown(expenses) == [(FOOD, 150), (TRANSPORT, 30)]


def test_empty_period():
    stats = compute_period_stats([])
    assert stats.total == 0
    assert stats.count == 0
    assert stats.average == 0
    assert stats.breakdown == []
    assert stats.categories_used == 0


def test_breakdown_ties_keep_first_seen_order():
    expenses = [E(20, SHOPPING), E(50, FOOD), E(20, TRANSPORT)]
    assert category_breakdown(expenses) == [(FOOD, 50), (SHOPPING, 20), (TRANSPORT, 20)]


def test_month_bounds():
    assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(date(2023, 12, 31)) == (date(2023, 12, 1), date(2023, 12, 31))


def test_daily_trend_is_zero_filled_and_cumulative():
    expenses = [
        E(100, FOOD, date(2024, 3, 1)),
        E(40, TRANSPORT, date(2024, 3, 3)),
        E(60, FOOD, date(2024, 3, 3)),
        E(999, FOOD, date(2024, 3, 20)),  # after as_of
        E(999, FOOD, date(2024, 2, 3)),  # other month
    ]
    trend = daily_trend(expenses, as_of=date(2024, 3, 4))
    assert [p.day for p in trend] == [1, 2, 3, 4]
    assert [p.daily_total for p in trend] == [100, 0, 100, 0]
    assert [p.cumulative_total for p in trend] == [100, 100, 200, 200]
    assert trend[2].date == date(2024, 3, 3)


def test_daily_trend_empty_without_expenses():
    assert daily_trend([], as_of=date(2024, 3, 4)) == []
