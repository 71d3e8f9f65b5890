"""Application configuration management using Pydantic Settings."""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application Environment
    app_env: str = Field(default="development", alias="APP_ENV")

    # Flask Configuration
    secret_key: str = Field(..., alias="SECRET_KEY")
    flask_app: str = Field(default="wsgi.py", alias="FLASK_APP")
    flask_env: str = Field(default="development", alias="FLASK_ENV")

    # Logging Configuration
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Projection assumptions
    default_fallback_age: float = Field(
        default=35.0, ge=0, le=120, alias="DEFAULT_FALLBACK_AGE"
    )
    default_annual_return: float = Field(
        default=0.07, ge=-0.5, le=0.5, alias="DEFAULT_ANNUAL_RETURN"
    )
    inflation_rate: float = Field(default=0.02, ge=0, le=0.2, alias="INFLATION_RATE")
    withdrawal_inflation_indexed: bool = Field(
        default=True, alias="WITHDRAWAL_INFLATION_INDEXED"
    )
    default_market_weather: str = Field(
        default="normal", alias="DEFAULT_MARKET_WEATHER"
    )
    monte_carlo_max_simulations: int = Field(
        default=10000, ge=1, le=100000, alias="MONTE_CARLO_MAX_SIMULATIONS"
    )

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v):
        """Ensure SECRET_KEY is provided and not a placeholder."""
        if not v or v == "your-secret-key-here-change-in-production":
            raise ValueError("SECRET_KEY must be set to a secure value")
        return v

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v):
        """Validate application environment."""
        allowed_envs = {"development", "testing", "production"}
        if v not in allowed_envs:
            raise ValueError(f"APP_ENV must be one of {allowed_envs}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator("default_market_weather")
    @classmethod
    def validate_default_market_weather(cls, v):
        """Validate the default market weather regime."""
        from horizon.models.market_weather import MARKET_WEATHER

        if v not in MARKET_WEATHER:
            raise ValueError(
                f"DEFAULT_MARKET_WEATHER must be one of {set(MARKET_WEATHER)}"
            )
        return v


def get_settings(env_file: Optional[str] = None) -> Settings:
    """Get application settings instance."""
    if env_file is not None:
        return Settings(_env_file=env_file)
    return Settings()


# Global settings instance - created lazily on first use
_settings: Optional[Settings] = None


def get_global_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings


def reset_global_settings() -> None:
    """Reset global settings instance (useful for testing)."""
    global _settings
    _settings = None
