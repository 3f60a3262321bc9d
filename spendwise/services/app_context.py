"""Application service container and request dependencies.

One `AppServices` instance is built per FastAPI app and kept on `app.state`.
It owns the process-lifetime collaborators (key-value store, rate provider,
budget notifier and its notification log). Routers reach them through the
small dependency functions below, so tests can build isolated apps from an
explicit `Settings` without touching module-level singletons.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from fastapi import Depends, Request
from starlette.concurrency import run_in_threadpool

from spendwise.core.config import Settings
from spendwise.db.dal import Database
from spendwise.models import ExpenseOut, UserPreferences
from spendwise.services.alerts import BudgetNotifier, Notification, NotificationLog
from spendwise.services.analytics_utils import month_bounds, total_spent
from spendwise.services.app_settings import load_preferences
from spendwise.services.rates.cache_service import RateProvider
from spendwise.services.rates.conversion import CurrencyConverter
from spendwise.services.rates.providers import make_rate_source
from spendwise.services.storage import KeyValueStore, make_store


@dataclass
class AppServices:
    settings: Settings
    db: Database
    store: KeyValueStore
    rate_provider: RateProvider
    alert_log: NotificationLog
    notifier: BudgetNotifier


def build_services(settings: Settings) -> AppServices:
    db = Database(settings.db_path)  # type: ignore[arg-type]
    store = make_store(settings, db)
    rate_provider = RateProvider(
        make_rate_source(settings),
        store,
        ttl_seconds=settings.rates_cache_ttl_seconds,
    )
    alert_log = NotificationLog(maxlen=settings.alert_log_size)
    notifier = BudgetNotifier(alert_log, warning_pct=settings.budget_warning_pct)
    return AppServices(
        settings=settings,
        db=db,
        store=store,
        rate_provider=rate_provider,
        alert_log=alert_log,
        notifier=notifier,
    )


def rows_to_expenses(rows: List[dict]) -> List[ExpenseOut]:
    return [ExpenseOut.model_validate(r) for r in rows]


def month_expenses(db: Database, as_of: Optional[date] = None) -> List[ExpenseOut]:
    start, end = month_bounds(as_of or date.today())
    return rows_to_expenses(db.list_expenses(start_date=start, end_date=end))


def check_budget(
    services: AppServices, as_of: Optional[date] = None
) -> Optional[Notification]:
    """Evaluate the current month's spend against the budget.

    Called after every change to the expense set or the budget.
    """
    total = total_spent(month_expenses(services.db, as_of))
    budget = load_preferences(services.store).monthly_budget
    return services.notifier.evaluate(total, budget)


# ------------- FastAPI dependencies ---------------


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def get_db(services: AppServices = Depends(get_services)) -> Database:
    return services.db


def get_store(services: AppServices = Depends(get_services)) -> KeyValueStore:
    return services.store


def get_preferences(store: KeyValueStore = Depends(get_store)) -> UserPreferences:
    return load_preferences(store)


async def get_converter(
    services: AppServices = Depends(get_services),
    prefs: UserPreferences = Depends(get_preferences),
) -> CurrencyConverter:
    rates = await run_in_threadpool(services.rate_provider.get_rates)
    return CurrencyConverter(
        currency=prefs.currency, rates=rates, locale=services.settings.default_locale
    )


__all__ = [
    "AppServices",
    "build_services",
    "check_budget",
    "month_expenses",
    "rows_to_expenses",
    "get_services",
    "get_db",
    "get_store",
    "get_preferences",
    "get_converter",
]
