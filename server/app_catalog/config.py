"""
App Catalog Configuration
=========================
Centralized settings for the catalog service.

Values are read from (highest priority first):
1. Keyword arguments to Settings()
2. Environment variables prefixed with APP_CATALOG_ (lists as JSON)
3. A .env file in the working directory
4. The defaults below
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from app_catalog.utils.path_manager import PathManager


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_CATALOG_",
        env_file=".env",
        extra="ignore",
    )

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    # Storage
    data_dir: Path = PathManager().get_user_data_dir()
    catalog_db_name: str = "catalog.db"

    # Scan sources. None means "use the platform defaults"
    start_menu_paths: Optional[List[str]] = None
    registry_paths: Optional[List[str]] = None

    # Display name for a shortcut whose file stem is blank
    unknown_shortcut_name: str = "Unknown Shortcut"

    @property
    def catalog_db_path(self) -> Path:
        return self.data_dir / "db" / self.catalog_db_name


# Singleton settings instance
settings = Settings()
