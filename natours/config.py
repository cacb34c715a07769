"""Application configuration settings."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "Natours"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 3000
    trust_proxy: bool = True

    # Static files
    static_dir: str = "public"
    static_url: str = "/static"

    # CORS
    cors_origins: str = "*"

    # Rate Limiting
    rate_limit_path_prefix: str = "/api"
    rate_limit_max: int = 100
    rate_limit_window_seconds: int = 60 * 60
    rate_limit_message: str = "Too many requests from this IP, please try again in an hour!"
    rate_limit_backend: Literal["memory", "redis"] = "memory"

    # Redis Settings
    redis_url: str = "redis://localhost:6379/0"
    redis_password: str = ""

    # Body parsing
    body_limit_bytes: int = 10 * 1024
    raw_body_limit_bytes: int = 100 * 1024
    webhook_path: str = "/webhook-checkout"

    # Sanitization
    hpp_whitelist: str = "duration,ratingsQuantity,ratingsAverage,maxGroupSize,difficulty,price"
    mongo_sanitize_replace_with: Optional[str] = None

    # Compression
    compression_min_size: int = 1000

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "console"
    log_requests: Optional[bool] = None

    @field_validator("cors_origins", "hpp_whitelist", mode="before")
    @classmethod
    def join_list_values(cls, v):
        """Accept either a comma separated string or a list."""
        return v if isinstance(v, str) else ",".join(v)

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def hpp_whitelist_set(self) -> frozenset[str]:
        """Query parameters allowed to appear more than once."""
        return frozenset(name.strip() for name in self.hpp_whitelist.split(",") if name.strip())

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.app_env == "development"

    @property
    def request_logging_enabled(self) -> bool:
        """Per-request logging defaults to development only."""
        if self.log_requests is not None:
            return self.log_requests
        return self.is_development


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
