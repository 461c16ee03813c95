"""
Configuration management for the trip budget core.
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TripBudgetConfig(BaseSettings):
    """Configuration settings for the trip budget core."""

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Storage Configuration
    trip_data_file: str = Field(default="data/trips.json", alias="TRIP_DATA_FILE")

    # Geocoding Configuration (LocationIQ)
    locationiq_api_key: Optional[str] = Field(default=None, alias="LOCATIONIQ_API_KEY")
    geocode_base_url: str = Field(
        default="https://us1.locationiq.com/v1/search", alias="GEOCODE_BASE_URL"
    )
    geocode_timeout: float = Field(default=10.0, alias="GEOCODE_TIMEOUT")
    geocode_user_agent: str = Field(
        default="tripbudget/1.0", alias="GEOCODE_USER_AGENT"
    )

    # Retry Configuration
    max_retries: int = Field(default=0, alias="MAX_RETRIES")
    retry_delay: float = Field(default=1.0, alias="RETRY_DELAY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()

    @field_validator("locationiq_api_key")
    @classmethod
    def blank_key_to_none(cls, v):
        """Treat an empty API key as not configured."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v):
        if v < 0:
            raise ValueError("MAX_RETRIES cannot be negative")
        return v

    @property
    def geocoding_enabled(self) -> bool:
        return self.locationiq_api_key is not None


def load_config(env_file: Optional[str] = None) -> TripBudgetConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return TripBudgetConfig()


# Global configuration instance
_config: Optional[TripBudgetConfig] = None


def get_config() -> TripBudgetConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> TripBudgetConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
