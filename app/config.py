import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_env: str = Field(default="development", alias="APP_ENV")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")

    log_level: str | None = Field(default=None, alias="LOG_LEVEL")
    log_to_file: bool = Field(default=True, alias="LOG_TO_FILE")
    log_dir: str = Field(default="logs", alias="LOG_DIR")
    log_backup_count: int = Field(default=24, alias="LOG_BACKUP_COUNT")

    cors_origins: list[str] = Field(default=["http://localhost:3000"], alias="CORS_ORIGINS")
    enable_metrics_endpoint: bool = Field(default=True, alias="ENABLE_METRICS_ENDPOINT")

    otel_enabled: bool = Field(default=False, alias="OTEL_ENABLED")
    otel_service_name: str = Field(default="roman-numeral-service", alias="OTEL_SERVICE_NAME")
    otel_exporter_otlp_endpoint: str = Field(
        default="http://localhost:4318/v1/traces",
        alias="OTEL_EXPORTER_OTLP_ENDPOINT",
    )
    service_version: str = Field(default="1.0.0", alias="SERVICE_VERSION")

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"

    @property
    def log_level_value(self) -> int:
        if self.log_level:
            return logging.getLevelNamesMapping().get(self.log_level.upper(), logging.INFO)
        return logging.DEBUG if self.is_development else logging.INFO

    @property
    def log_path(self) -> Path:
        return Path(self.log_dir)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
