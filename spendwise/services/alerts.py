"""Edge-triggered budget notifications.

`BudgetNotifier` remembers the last budget status it observed and publishes a
notification only when the status changes into 'warning' or 'exceeded'.
Re-evaluating at an unchanged status is a no-op. With the budget disabled (0)
evaluation is skipped entirely and the remembered status is left as is.

The remembered status lives for the process lifetime only. After a restart
the first evaluation in a warning/exceeded state notifies once more.

Notification shape:
  severity: 'warning' | 'error'
  title: short headline
  body: human readable detail, money in NGN
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Deque, List, Optional, Protocol

from spendwise.models import BASE_CURRENCY, BudgetStatus
from spendwise.services.budget_utils import (
    DEFAULT_WARNING_PCT,
    budget_status,
    usage_ratio,
)
from spendwise.services.rates.conversion import format_amount

logger = logging.getLogger("spendwise.alerts")

SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"


@dataclass(frozen=True)
class Notification:
    severity: str
    title: str
    body: str
    status: BudgetStatus
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None: ...


class NotificationLog:
    """Bounded in-memory sink; newest last. Each notification is also logged."""

    def __init__(self, maxlen: int = 50):
        self._items: Deque[Notification] = deque(maxlen=maxlen)

    def notify(self, notification: Notification) -> None:
        self._items.append(notification)
        level = logging.ERROR if notification.severity == SEVERITY_ERROR else logging.WARNING
        logger.log(
            level,
            notification.title,
            extra={"status": notification.status.value, "body": notification.body},
        )

    def recent(self, limit: Optional[int] = None) -> List[Notification]:
        items = list(self._items)
        return items[-limit:] if limit else items

    def clear(self) -> None:
        self._items.clear()


def _format_base(amount: float) -> str:
    return format_amount(amount, BASE_CURRENCY)


def build_notification(
    status: BudgetStatus,
    total_spent: float,
    monthly_budget: float,
    formatter: Callable[[float], str] = _format_base,
) -> Optional[Notification]:
    if status is BudgetStatus.EXCEEDED:
        overage = max(total_spent - monthly_budget, 0.0)
        return Notification(
            severity=SEVERITY_ERROR,
            title="Budget Exceeded!",
            body=(
                f"You have exceeded your monthly budget of {formatter(monthly_budget)} "
                f"by {formatter(overage)}. Please review your expenses."
            ),
            status=status,
        )
    if status is BudgetStatus.WARNING:
        pct = usage_ratio(total_spent, monthly_budget) * 100
        remaining = monthly_budget - total_spent
        return Notification(
            severity=SEVERITY_WARNING,
            title="Budget Warning",
            body=(
                f"You've used {pct:.1f}% of your budget. "
                f"Only {formatter(remaining)} remaining."
            ),
            status=status,
        )
    return None


class BudgetNotifier:
    def __init__(
        self,
        sink: NotificationSink,
        *,
        warning_pct: float = DEFAULT_WARNING_PCT,
        formatter: Callable[[float], str] = _format_base,
    ):
        self._sink = sink
        self._warning_pct = warning_pct
        self._formatter = formatter
        self._last_status: Optional[BudgetStatus] = None

    @property
    def last_status(self) -> Optional[BudgetStatus]:
        return self._last_status

    def evaluate(
        self, total_spent: float, monthly_budget: float
    ) -> Optional[Notification]:
        """Record the current status; return the notification if one fired."""
        if monthly_budget == 0:
            return None
        status = budget_status(total_spent, monthly_budget, self._warning_pct)
        if status is self._last_status:
            return None
        notification = build_notification(
            status, total_spent, monthly_budget, self._formatter
        )
        if notification is not None:
            self._sink.notify(notification)
        self._last_status = status
        return notification


__all__ = [
    "BudgetNotifier",
    "Notification",
    "NotificationLog",
    "NotificationSink",
    "build_notification",
]
