"""
Shared configuration management for the Product Catalog services.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # External services
    postgres_dsn: str = Field(default="postgresql://localhost:5432/catalog")
    redis_url: str = Field(default="redis://localhost:6379/0")
    kafka_bootstrap: str = Field(default="localhost:9092")
    product_events_topic: str = Field(default="catalog.products.events.v1")

    # Cache
    cache_key_prefix: str = Field(default="ProductCache_")
    cache_ttl_seconds: Optional[int] = Field(default=None, ge=1)

    # Per-call timeout budget for external services
    store_timeout_seconds: float = Field(default=30.0, gt=0)
    cache_timeout_seconds: float = Field(default=5.0, gt=0)
    queue_timeout_seconds: float = Field(default=10.0, gt=0)

    # Persistence pool
    store_pool_min_size: int = Field(default=2, ge=1)
    store_pool_max_size: int = Field(default=10, ge=1)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port)
