"""Application configuration settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment or a ``.env`` file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Application
    APP_NAME: str = "Vibely API"
    APP_VERSION: str = "0.1.0"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"

    # Personalization credentials; both must be set to enable the engine
    RECOMBEE_DATABASE_ID: Optional[str] = None
    RECOMBEE_PRIVATE_TOKEN: Optional[str] = None
    PERSONALIZATION_TIMEOUT_SECONDS: float = 0.5

    # Recommendations
    DEFAULT_RECOMMENDATION_COUNT: int = 10
    MAX_RECOMMENDATION_COUNT: int = 50

    # Storage
    VENUE_SEED_CSV: Optional[str] = None

    @property
    def personalization_enabled(self) -> bool:
        """True when both personalization credentials are present and non-blank."""
        return bool(
            self.RECOMBEE_DATABASE_ID
            and self.RECOMBEE_DATABASE_ID.strip()
            and self.RECOMBEE_PRIVATE_TOKEN
            and self.RECOMBEE_PRIVATE_TOKEN.strip()
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
