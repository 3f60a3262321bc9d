from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from spendwise.core.errors import ImportFormatError
from spendwise.models import PreferencesUpdateIn, UserPreferences
from spendwise.services.app_context import (
    AppServices,
    check_budget,
    get_preferences,
    get_services,
)
from spendwise.services.app_settings import update_preferences
from spendwise.services.backup import backup_filename, export_expenses, import_expenses

router = APIRouter(prefix="/settings", tags=["settings"])


class PreferencesWriteResponse(BaseModel):
    preferences: UserPreferences
    budget_alert: Optional[str] = None


class ImportResult(BaseModel):
    imported: int
    budget_alert: Optional[str] = None


@router.get("", response_model=UserPreferences, summary="Current preferences")
async def get_settings_endpoint(prefs: UserPreferences = Depends(get_preferences)):
    return prefs


@router.put(
    "", response_model=PreferencesWriteResponse, summary="Update preferences (partial)"
)
async def put_settings_endpoint(
    payload: PreferencesUpdateIn,
    services: AppServices = Depends(get_services),
):
    """Currency, theme, NGN monthly budget and trend chart visibility."""
    try:
        prefs = update_preferences(services.store, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    notification = None
    if payload.monthly_budget is not None:
        notification = check_budget(services)
    return PreferencesWriteResponse(
        preferences=prefs,
        budget_alert=notification.title if notification else None,
    )


@router.get("/export", summary="Download every expense as a JSON backup")
async def export_endpoint(services: AppServices = Depends(get_services)):
    filename = backup_filename(date.today())
    return JSONResponse(
        content=export_expenses(services.db),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportResult, summary="Replace expenses from a backup")
async def import_endpoint(
    payload: Any = Body(..., description="JSON array previously produced by /settings/export"),
    services: AppServices = Depends(get_services),
):
    try:
        imported = import_expenses(services.db, payload)
    except ImportFormatError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    notification = check_budget(services)
    return ImportResult(
        imported=imported,
        budget_alert=notification.title if notification else None,
    )
