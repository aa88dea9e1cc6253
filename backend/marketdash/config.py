from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from marketdash.models.enums import AggregationMode, FallbackMode


class Settings(BaseSettings):
    """
    Application configuration using Pydantic Settings.
    Environment variables are loaded from .env file; every field has a default
    so the dashboard runs without any environment at all.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Upstream APIs (all public, read-only)
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coincap_base_url: str = "https://api.coincap.io/v2"
    jsonplaceholder_base_url: str = "https://jsonplaceholder.typicode.com"
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5"
    openweather_api_key: str = "demo"
    http_timeout_seconds: float = 10.0

    # Which adapter fills each snapshot slot
    metrics_source: str = "coingecko"
    chart_source: str = "jsonplaceholder"
    table_source: str = "coingecko"
    channels_source: str = "jsonplaceholder"

    # Failure handling
    fallback_mode: FallbackMode = FallbackMode.STATIC
    aggregation_mode: AggregationMode = AggregationMode.ALL_OR_NOTHING

    # Refresh scheduling
    refresh_interval_seconds: float = 30.0
    refresh_on_startup: bool = True

    # Record sizes
    table_limit: int = 12
    metrics_asset_limit: int = 5
    chart_days: int = 30
    table_page_size: int = 8

    # Seed for the static generator (None = non-reproducible jitter)
    static_seed: Optional[int] = None

    # Optional geographic panel
    geo_enabled: bool = False
    geo_cities: str = "London,New York,Tokyo,Sydney,Berlin"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_cors_origins: str = "http://localhost:3000,http://localhost:5173"
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.api_cors_origins.split(",")]

    @property
    def geo_cities_list(self) -> list[str]:
        """Parse geographic cities from comma-separated string."""
        return [city.strip() for city in self.geo_cities.split(",") if city.strip()]


# Global settings instance
def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()


settings = get_settings()
