from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from spendwise.core.config import Settings
from spendwise.models import (
    BudgetProgress,
    Currency,
    ExpenseCategory,
    ExpenseView,
    UserPreferences,
)
from spendwise.services.analytics_utils import (
    compute_period_stats,
    daily_trend,
    month_bounds,
)
from spendwise.services.app_context import (
    AppServices,
    get_converter,
    get_preferences,
    get_services,
    month_expenses,
)
from spendwise.services.budget_utils import summarize_budget
from spendwise.services.money import round2
from spendwise.services.rates.conversion import CurrencyConverter

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

RECENT_LIMIT = 5


class CategoryBreakdownItem(BaseModel):
    category: ExpenseCategory
    label: str
    total: float  # NGN
    display_total: float
    formatted_total: str


class TrendPoint(BaseModel):
    day: int
    date: date
    daily_total: float  # NGN
    cumulative_total: float  # NGN
    display_daily_total: float


class Dashboard(BaseModel):
    period_start: date
    period_end: date
    display_currency: Currency
    total: float  # NGN
    count: int
    average: float  # NGN
    categories_used: int
    formatted_total: str
    formatted_average: str
    category_breakdown: List[CategoryBreakdownItem]
    trend: Optional[List[TrendPoint]] = None
    budget: Optional[BudgetProgress] = None
    recent: List[ExpenseView] = []


def build_budget_progress(
    spent: float,
    prefs: UserPreferences,
    converter: CurrencyConverter,
    settings: Settings,
) -> BudgetProgress:
    summary = summarize_budget(spent, prefs.monthly_budget, settings.budget_warning_pct)
    return BudgetProgress(
        enabled=summary.enabled,
        monthly_budget=summary.monthly_budget,
        spent=round2(summary.spent),
        remaining=round2(summary.remaining),
        percentage_used=round(summary.percentage_used, 1),
        status=summary.status,
        formatted_budget=converter.format(summary.monthly_budget),
        formatted_spent=converter.format(summary.spent),
    )


@router.get("", response_model=Dashboard, summary="Monthly spending overview")
async def dashboard_endpoint(
    as_of: Optional[date] = Query(
        None, description="Any date inside the month to summarize (defaults to today)"
    ),
    services: AppServices = Depends(get_services),
    prefs: UserPreferences = Depends(get_preferences),
    converter: CurrencyConverter = Depends(get_converter),
):
    """Totals, average, category breakdown, daily trend, budget progress and
    the most recent expenses of the month (newest first).

    Money fields without a `display_` / `formatted_` prefix are NGN. The trend
    is omitted when the user hides the trend chart; budget progress is omitted
    while the budget is disabled (0).
    """
    as_of = as_of or date.today()
    start, end = month_bounds(as_of)
    expenses = month_expenses(services.db, as_of)
    stats = compute_period_stats(expenses)

    breakdown = [
        CategoryBreakdownItem(
            category=category,
            label=category.label,
            total=round2(total),
            display_total=round2(converter.to_display(total)),
            formatted_total=converter.format(total),
        )
        for category, total in stats.breakdown
    ]
    trend = None
    if prefs.show_trend_chart:
        trend = [
            TrendPoint(
                day=p.day,
                date=p.date,
                daily_total=round2(p.daily_total),
                cumulative_total=round2(p.cumulative_total),
                display_daily_total=round2(converter.to_display(p.daily_total)),
            )
            for p in daily_trend(expenses, as_of)
        ]
    budget = None
    if prefs.monthly_budget > 0:
        budget = build_budget_progress(stats.total, prefs, converter, services.settings)
    recent = [
        ExpenseView(
            **e.model_dump(),
            display_currency=converter.currency,
            display_amount=converter.to_display(e.amount),
            formatted_amount=converter.format(e.amount),
        )
        for e in expenses[:RECENT_LIMIT]
    ]

    return Dashboard(
        period_start=start,
        period_end=end,
        display_currency=converter.currency,
        total=round2(stats.total),
        count=stats.count,
        average=round2(stats.average),
        categories_used=stats.categories_used,
        formatted_total=converter.format(stats.total),
        formatted_average=converter.format(stats.average),
        category_breakdown=breakdown,
        trend=trend,
        budget=budget,
        recent=recent,
    )
