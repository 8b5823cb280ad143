"""
Application Settings and Configuration Management

Uses pydantic-settings for type-safe configuration from environment variables
(prefixed MOODFLOW_) or a local .env file.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    app_name: str = "Moodflow"
    environment: str = Field(default="development")

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    # Weather service (Open-Meteo, no API key required)
    geocoding_url: str = Field(default="https://geocoding-api.open-meteo.com/v1/search")
    forecast_url: str = Field(default="https://api.open-meteo.com/v1/forecast")
    http_timeout_seconds: float = Field(default=10.0, gt=0)
    language: str = Field(default="fr")
    forecast_days: int = Field(default=7, ge=1, le=16)
    default_city: str = Field(default="Paris")

    # Forecast pipeline
    corpus_days: int = Field(default=500, ge=10)
    train_ratio: float = Field(default=0.8)
    knn_k: int = Field(default=5, ge=1)
    tree_max_depth: int = Field(default=5, ge=0)
    tree_min_samples_split: int = Field(default=10, ge=2)

    model_config = SettingsConfigDict(
        env_prefix="MOODFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is valid"""
        allowed = ["development", "staging", "production", "test"]
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("train_ratio")
    @classmethod
    def validate_train_ratio(cls, v: float) -> float:
        if not 0 < v < 1:
            raise ValueError("train_ratio must be strictly between 0 and 1")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if level not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return level

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment == "production"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
