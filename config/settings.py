from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Remote salon API (JSON over HTTP)
    API_BASE_URL: str = "http://localhost:3000/api"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Request cache
    CACHE_DURATION_SECONDS: float = 300.0  # 5 minutes, overridable per call

    # Ledger reconciliation
    BALANCE_EPSILON: Decimal = Decimal("0.01")
    DEFAULT_CURRENCY: str = "RWF"

    # Payment status polling
    PAYMENT_POLL_MAX_ATTEMPTS: int = 20
    PAYMENT_POLL_INTERVAL_SECONDS: float = 3.0

    # App
    APP_NAME: str = "Salon Wallet"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"


settings = Settings()
