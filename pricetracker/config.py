from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or a .env file."""

    APP_NAME: str = "Price Tracker"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./pricetracker.db"

    # Pricing oracle (OpenRouter chat completions)
    OPENROUTER_API_KEY: str = ""
    PRICING_API_URL: str = "https://openrouter.ai/api/v1/chat/completions"
    PRICING_MODEL: str = "deepseek/deepseek-r1-0528:free"
    PRICING_TEMPERATURE: float = 0.2
    PRICING_TIMEOUT: float = 30.0  # seconds

    # Listing
    DEFAULT_PAGE_SIZE: int = 20

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
