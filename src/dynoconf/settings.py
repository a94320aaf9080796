from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dynoconf.common import AppInfo, LoggingConfig
from dynoconf.constants import DEFAULT_CONFIG_PATH, ENV_PREFIX
from dynoconf.sync import SyncOptions


class Settings(BaseSettings):
    app: AppInfo = AppInfo()
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    service_name: str | None = None
    redis_url: str = "redis://localhost:6379"
    config_path: Path = Path(DEFAULT_CONFIG_PATH)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        nested_model_default_partial_update=True,
        extra="ignore",
    )

    def to_sync_options(
        self,
        *,
        service_name: str | None = None,
        redis_url: str | None = None,
        config_path: Path | None = None,
    ) -> SyncOptions:
        """Build engine options, letting explicit arguments override settings."""
        return SyncOptions(
            service_name=service_name or self.service_name or "",
            redis_url=redis_url or self.redis_url,
            config_path=config_path or self.config_path,
        )


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None


# Private singleton instance, created on first use
_settings: Settings | None = None


__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
]
