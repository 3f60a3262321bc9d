import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .db.migrate import apply_migrations
from .core import errors
from .routers import alerts, budgets, dashboard, expenses, health, rates, settings as settings_router
from .services.app_context import AppServices, build_services

logger = logging.getLogger("spendwise")


async def _refresh_rates_periodically(services: AppServices) -> None:
    interval = services.settings.rates_refresh_interval_seconds
    while True:
        await run_in_threadpool(services.rate_provider.get_rates)
        await asyncio.sleep(interval)


@asynccontextmanager
async def lifespan(app: FastAPI):
    services: AppServices = app.state.services
    task = None
    if services.settings.rates_auto_refresh:
        task = asyncio.create_task(_refresh_rates_periodically(services))
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    """
    settings = settings_override or get_settings()
    if settings.db_path is None:
        settings.init_post_load()
    init_logging(debug=settings.debug)

    # Ensure database schema (idempotent) so test-injected fresh DBs have tables
    try:
        apply_migrations(settings.db_path)  # type: ignore[arg-type]
    except Exception:
        logger.exception("failed to apply migrations on startup")
        raise

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.services = build_services(settings)

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(expenses.router)
    app.include_router(dashboard.router)
    app.include_router(budgets.router)
    app.include_router(rates.router)
    app.include_router(settings_router.router)
    app.include_router(alerts.router)

    @app.get("/")
    async def root():
        return {"message": "SpendWise API", "version": settings.version}

    return app


app = create_app()
