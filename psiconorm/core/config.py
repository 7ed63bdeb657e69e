from __future__ import annotations

from functools import lru_cache

from typing import Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from psiconorm.core.errors import ConfigurationError


class Settings(BaseSettings):
    """Strongly typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Psiconorm API")
    environment: Literal["dev", "test", "staging", "prod"] = Field(default="dev")
    debug: bool = Field(default=False)
    database_url: str = Field(default="sqlite+pysqlite:///./psiconorm.db")

    run_startup_ddl: bool = Field(default=True)

    # Normative resolution behaviour
    store_fallback_enabled: bool = Field(
        default=True,
        description="Retry a failed table listing once with a generic-only query",
    )
    default_evaluation_context: Literal["transito", "rh", "clinico"] = Field(default="transito")
    normative_age_min: int = Field(default=16, ge=0, description="Youngest age covered by the standard age bands")
    normative_age_max: int = Field(default=92, ge=1, description="Oldest age covered by the standard age bands")
    traffic_min_age: int = Field(default=18, ge=0, description="Minimum licensing age for traffic evaluations")

    debug_instrumentation_enabled: bool = Field(default=True)

    # Database connection pooling settings
    db_pool_size: int = Field(default=5, ge=1, le=50, description="Number of connections to keep in the pool")
    db_max_overflow: int = Field(default=10, ge=0, le=100, description="Max connections to create beyond pool_size")
    db_pool_timeout: int = Field(default=30, ge=1, le=300, description="Seconds to wait for connection from pool")
    db_pool_recycle: int = Field(default=3600, ge=300, description="Seconds before recycling a connection")
    db_pool_pre_ping: bool = Field(default=True, description="Enable connection health checks before use")

    @field_validator("database_url", mode="before")
    @classmethod
    def _strip_database_url(cls, value: object) -> object:
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValueError("DATABASE_URL must not be blank")
            return stripped
        return value

    @computed_field(return_type=bool)
    def is_production(self) -> bool:
        return self.environment == "prod"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def validate_runtime_settings(current: Settings | None = None) -> Settings:
    """Fail fast on settings combinations the engine cannot work with."""
    current = current or get_settings()
    if current.normative_age_min >= current.normative_age_max:
        raise ConfigurationError(
            detail={
                "normative_age_min": current.normative_age_min,
                "normative_age_max": current.normative_age_max,
            }
        )
    return current
