from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from spendwise.models import BudgetStatus
from spendwise.services.app_context import AppServices, get_services

router = APIRouter(prefix="/alerts", tags=["alerts"])


class AlertOut(BaseModel):
    severity: str
    title: str
    body: str
    status: BudgetStatus
    created_at: datetime


@router.get("", response_model=List[AlertOut], summary="Recent budget notifications")
async def list_alerts(
    limit: int = Query(20, ge=1, le=200),
    services: AppServices = Depends(get_services),
):
    """Newest first."""
    items = services.alert_log.recent(limit)
    return [
        AlertOut(
            severity=n.severity,
            title=n.title,
            body=n.body,
            status=n.status,
            created_at=n.created_at,
        )
        for n in reversed(items)
    ]
