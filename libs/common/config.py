from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "test", "development", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    SERVICE_NAME: str = "storefront"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5001",
    ]

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./storefront.db"
    DB_ECHO: bool = False
    # Admission limits for the Database handle
    DB_POOL_SIZE: int = 3
    DB_QUEUE_LIMIT: int = 10
    DB_POOL_TIMEOUT: float = 10.0
    DB_POOL_RECYCLE: int = 1800
    CREATE_TABLES_ON_STARTUP: bool = False

    # Auth (tokens are issued elsewhere, only verified here)
    JWT_SECRET: str = "test-jwt-secret"
    JWT_ALGORITHM: str = "HS256"

    # Checkout
    TAX_ENABLED: bool = True
    LOYALTY_POINTS_PER_CURRENCY_UNIT: int = 10
    DELIVERY_ESTIMATE_DAYS: int = 7
    CHECKOUT_VERIFY_CART_SNAPSHOT: bool = True

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg://", 1)
            if v.startswith("sqlite:///"):
                return v.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return v

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def check_pool_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
