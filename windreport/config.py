from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # NOAA Storm Events bulk CSV directory
    noaa_dir_url: str = "https://www.ncei.noaa.gov/pub/data/swdi/stormevents/csvfiles/"
    cache_dir: str = "data/noaa"
    directory_cache_ttl_seconds: float = 3600.0

    # Lookback window for event search
    lookback_years: int = 10

    # Geocoding (Nominatim requires an identifying User-Agent)
    geocoder_url: str = "https://nominatim.openstreetmap.org/search"
    geocoder_user_agent: str = "WindReport/2.0 (NOAA Storm Events Lookup)"

    # Applies per read/connect, so large streamed downloads are not cut off
    http_timeout: float = 60.0

    # App
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
