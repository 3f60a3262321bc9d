from fastapi import APIRouter, Depends

from spendwise.db.migrate import CURRENT_SCHEMA_VERSION
from spendwise.services.app_context import AppServices, get_services

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness and storage check")
async def health(services: AppServices = Depends(get_services)):
    return {
        "status": "ok",
        "version": services.settings.version,
        "schema_version": CURRENT_SCHEMA_VERSION,
        "expenses": services.db.count_expenses(),
        "storage_backend": services.settings.storage_backend,
        "rate_provider": services.settings.exchange_rate_provider,
    }
