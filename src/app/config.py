"""Configuration management using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "FIRMS-MAP"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # NASA FIRMS area API — https://firms.modaps.eosdis.nasa.gov/api/map_key/
    firms_map_key: str = ""             # empty disables live fetching
    firms_api_url: str = "https://firms.modaps.eosdis.nasa.gov/api/area/csv"
    firms_source: str = "VIIRS_SNPP_NRT"
    firms_day_range: int = 1            # 1..10 days
    firms_timeout: float = 20.0         # seconds

    # Initial map view
    map_center_lat: float = 37.7749
    map_center_lng: float = -122.4194


settings = Settings()
