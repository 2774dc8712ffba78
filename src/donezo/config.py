"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from DONEZO_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DONEZO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Donezo", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Environment"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    port: int = Field(default=3000, description="Port to bind to")
    reload: bool = Field(default=False, description="Auto-reload on code changes")
    base_path: str = Field(
        default="", description="URL prefix applied to every route, e.g. /todo"
    )

    # Database
    database_url: str = Field(
        default="sqlite:///todos.db", description="SQLite database URL"
    )
    db_echo: bool = Field(default=False, description="Echo SQL statements")

    # Security
    password: SecretStr = Field(..., description="Shared login secret")

    # OpenTelemetry
    otel_enabled: bool = Field(default=False, description="Enable OpenTelemetry")
    otel_service_name: str = Field(default="donezo", description="Service name for traces")
    otel_exporter_otlp_endpoint: str = Field(
        default="http://localhost:4318", description="OTLP exporter endpoint"
    )
    otel_exporter_otlp_headers: str = Field(
        default="", description="OTLP headers (comma-separated key=value pairs)"
    )
    otel_resource_attributes: str = Field(
        default="", description="Resource attributes (comma-separated key=value pairs)"
    )
    otel_traces_exporter: Literal["otlp", "console", "none"] = Field(
        default="otlp", description="Traces exporter"
    )
    otel_metrics_exporter: Literal["otlp", "console", "none"] = Field(
        default="none", description="Metrics exporter"
    )

    @field_validator("base_path")
    @classmethod
    def normalize_base_path(cls, value: str) -> str:
        """Strip trailing slashes and ensure a leading one; "" and "/" mean no prefix."""
        path = value.strip().rstrip("/")
        if not path:
            return ""
        if not path.startswith("/"):
            path = f"/{path}"
        return path

    def get_otlp_headers(self) -> dict[str, str]:
        """Parse OTLP headers from comma-separated string."""
        if not self.otel_exporter_otlp_headers:
            return {}
        return dict(
            item.split("=", 1)
            for item in self.otel_exporter_otlp_headers.split(",")
            if "=" in item
        )

    def get_resource_attributes(self) -> dict[str, str]:
        """Parse resource attributes from comma-separated string."""
        if not self.otel_resource_attributes:
            return {}
        return dict(
            item.split("=", 1) for item in self.otel_resource_attributes.split(",") if "=" in item
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
