# orderdesk/core/config.py
from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - ERP_API_BASE_URL (REST backend that owns products/customers/orders)
      - JWT_SECRET (secret the ERP auth service signs access tokens with)

    Optional:
      - CURRENCY_DECIMALS, DEFAULT_SHIPPING_FEE, DEBT_WARNING_PERCENT
      - CORS_ORIGINS, LOG_LEVEL
    """

    PROJECT_NAME: str = "Order Desk API"
    API_V1_STR: str = "/api/v1"

    # ERP backend
    ERP_API_BASE_URL: str
    ERP_API_TIMEOUT: float = 30.0

    # JWT verification (tokens are issued by the ERP auth service)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    # Money handling: summaries are rounded once to this many places
    # (0 => whole VND).
    CURRENCY_DECIMALS: int = 0
    DEFAULT_SHIPPING_FEE: Decimal = Decimal("0")

    # Debt usage (% of credit limit) from which a customer is flagged "warning"
    DEBT_WARNING_PERCENT: Decimal = Decimal("80")

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
