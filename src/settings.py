from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["text", "json"] = "text"
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    model_config = SettingsConfigDict(env_prefix="SERVICE_")


class DatabaseSettings(BaseSettings):
    url: str = "sqlite:///./db/dispatch.db"
    echo: bool = False

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if "://" not in v:
            raise ValueError("Database URL must include a scheme, e.g. sqlite:///./db/dispatch.db")
        return v


class RealtimeSettings(BaseSettings):
    heartbeat_interval_seconds: float = Field(
        default=5.0,
        ge=0.01,
        le=60.0,
        description="Seconds between keep-alive tick events on every open event stream",
    )
    max_queue_size: int = Field(
        default=1000,
        ge=10,
        description="Pending messages buffered per subscriber before new ones are dropped",
    )

    model_config = SettingsConfigDict(env_prefix="REALTIME_")


class APISettings(BaseSettings):
    key: str = ""

    model_config = SettingsConfigDict(env_prefix="API_")

    @model_validator(mode="after")
    def validate_credentials_provided(self) -> "APISettings":
        if not self.key:
            raise ValueError("Required credential not provided: API_KEY")
        return self


class CORSSettings(BaseSettings):
    origins: str = "http://localhost:5173,http://localhost:3000"

    model_config = SettingsConfigDict(env_prefix="CORS_")


class RateLimitSettings(BaseSettings):
    bookings: str = "60/minute"
    stream_connections_per_minute: int = Field(default=10, ge=1)

    model_config = SettingsConfigDict(env_prefix="RATE_LIMIT_")


class Settings(BaseSettings):
    service: ServiceSettings = Field(default_factory=ServiceSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    realtime: RealtimeSettings = Field(default_factory=RealtimeSettings)
    api: APISettings = Field(default_factory=APISettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
