"""
Application configuration.

Loads settings from environment variables (prefixed ``ASSET_MODULE_``)
and an optional ``.env`` file.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from assetmodule.core.models import StubFormat, StubStrategy


class Settings(BaseSettings):
    """Settings loaded from environment."""
    
    model_config = SettingsConfigDict(
        env_prefix="ASSET_MODULE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
    
    # ==========================================================================
    # Environment
    # ==========================================================================
    
    environment: str = "development"
    log_level: str = "INFO"
    
    # ==========================================================================
    # Emission
    # ==========================================================================
    
    source_base: str = "src"
    destination_base: str = "build"
    public_path: str = ""
    stub_strategy: StubStrategy = StubStrategy.PUBLIC_PATH
    stub_format: StubFormat = StubFormat.COMMONJS
    
    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging at ``level`` (defaults to the settings value)."""
    level = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
