"""
Configuration management using environment variables.
Holds the catalog core settings with validation and defaults.
"""

from datetime import timedelta
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CatalogConfig(BaseSettings):
    """
    Configuration class for the catalog core.
    Every field can be overridden with a ``CATALOG_``-prefixed variable.
    """

    # Search
    search_delay_seconds: float = Field(default=1.0, description="Simulated latency per search")

    # Sessions and users
    session_ttl_minutes: int = Field(default=60, description="Token validity window")
    min_password_length: int = Field(default=6, description="Shortest accepted password")

    # Seed data
    seed_file: Optional[str] = Field(default=None, description="JSON file of seed books")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    debug: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('search_delay_seconds')
    @classmethod
    def validate_search_delay(cls, v):
        """Ensure the simulated delay is reasonable."""
        if v < 0 or v > 30:
            raise ValueError('search_delay_seconds must be between 0 and 30')
        return v

    @field_validator('session_ttl_minutes')
    @classmethod
    def validate_session_ttl(cls, v):
        if v < 1:
            raise ValueError('session_ttl_minutes must be at least 1')
        return v

    @field_validator('min_password_length')
    @classmethod
    def validate_min_password_length(cls, v):
        if v < 1:
            raise ValueError('min_password_length must be at least 1')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None

    def get_session_ttl(self) -> timedelta:
        return timedelta(minutes=self.session_ttl_minutes)


# Global configuration instance
config = CatalogConfig()
