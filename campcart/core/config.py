"""Cart client configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Durable cart backend
    cart_api_base_url: str = "http://localhost:8001"
    request_timeout: float = 10.0
    read_retries: int = 3
    retry_delay: float = 1.0

    # Catalog service
    catalog_api_base_url: str = "http://localhost:5000"

    # Device-local storage; in memory when unset
    storage_path: Optional[str] = None

    # Migration
    max_migration_attempts: int = 5

    # Checkout summary
    tax_rate: float = 0.10
    service_fee: float = 2.50
    currency: str = "EUR"

    class Config:
        env_prefix = "CAMPCART_"
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
