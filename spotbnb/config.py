# SpotBnB - Vacation Rental Booking API
# Copyright (C) 2025 Oleg Tokmakov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


"""Configuration management for SpotBnB."""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class AppConfig(BaseModel):
    """Application configuration."""

    name: str = "SpotBnB"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    base_url: str = "http://localhost:8000"
    log_level: str = "INFO"


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/spotbnb.db"
    url: Optional[str] = None  # Overrides path, e.g. postgresql+psycopg://...
    serialize_writes: bool = True  # SQLite only: BEGIN IMMEDIATE transactions


class SecurityConfig(BaseModel):
    """Security configuration."""

    auth_token_days: int = 30
    token_cookie: str = "token"


class Settings(BaseModel):
    """Main settings container."""

    app: AppConfig = Field(default_factory=AppConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)


def load_config(config_path: Optional[str] = None) -> Settings:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, tries default locations.

    Returns:
        Settings object with loaded configuration.
    """
    default_paths = [
        Path("config/config.yaml"),
        Path("config.yaml"),
        Path("/etc/spotbnb/config.yaml"),
    ]

    # Allow override via environment variable
    if config_path is None:
        config_path = os.environ.get("SPOTBNB_CONFIG")

    config_file = None

    if config_path:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for path in default_paths:
            if path.exists():
                config_file = path
                break

    if config_file is None:
        logger.info("No config file found, using defaults")
        return Settings()

    logger.info("Loading config from: %s", config_file)

    with open(config_file, "r") as f:
        config_data = yaml.safe_load(f) or {}

    return Settings(**config_data)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def init_settings(config_path: Optional[str] = None) -> Settings:
    """Initialize settings from config file."""
    global _settings
    _settings = load_config(config_path)
    return _settings


def update_settings(new_settings: Settings) -> None:
    """Update the global settings instance."""
    global _settings
    _settings = new_settings


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for the application."""
    if level is None:
        level = get_settings().app.log_level

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
