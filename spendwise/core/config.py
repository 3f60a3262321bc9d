from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variables use the SPENDWISE_ prefix (e.g. SPENDWISE_DEBUG,
    SPENDWISE_DATA_DIR, SPENDWISE_RATES_CACHE_TTL_SECONDS).
    """

    model_config = SettingsConfigDict(
        env_prefix="SPENDWISE_", env_file=".env", case_sensitive=False, extra="ignore"
    )

    # Basic app metadata
    app_name: str = "SpendWise"
    debug: bool = False
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "spendwise.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided
    # Allowed: 'local' (SQLite file), 'memory' (process-local dict)
    storage_backend: str = "local"

    # Currency & exchange rates
    default_locale: str = "en_US"
    exchange_api_base_url: AnyHttpUrl = "https://api.exchangerate-api.com/v4/latest"
    http_timeout_seconds: float = 5.0
    http_retries: int = 1
    rates_cache_ttl_seconds: int = 3600  # 1 hour
    rates_refresh_interval_seconds: int = 3600
    rates_auto_refresh: bool = False
    # Allowed: 'static' (built-in default table), 'external-http' (live API)
    exchange_rate_provider: str = "external-http"

    # Budget alerts
    budget_warning_pct: float = 80.0
    alert_log_size: int = 50

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.data_dir.mkdir(parents=True, exist_ok=True)
        allowed_providers = {"static", "external-http"}
        if self.exchange_rate_provider not in allowed_providers:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed_providers}"
            )
        if self.storage_backend == "remote":
            raise ValueError("storage_backend 'remote' is disabled in this build")
        if self.storage_backend not in {"local", "memory"}:
            raise ValueError(f"Unsupported storage_backend '{self.storage_backend}'")
        if not (0 < self.budget_warning_pct < 100):
            raise ValueError("budget_warning_pct must be between 0 and 100")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
