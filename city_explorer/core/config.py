from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Google Maps Platform credential, used to build every provider URL
    GOOGLE_MAPS_API_KEY: str = ""
    MAPS_BASE_URL: str = "https://maps.googleapis.com/maps/api"
    MAPS_LIBRARIES: str = "places"

    # Nearby search
    SEARCH_RADIUS: int = 30000  # meters
    MAX_RESULTS: int = 20
    CATEGORY_TYPES: dict[str, str] = {
        "attraction": "tourist_attraction",
        "lodging": "lodging",
        "restaurant": "restaurant",
    }

    PHOTO_MAX_WIDTH: int = 400
    REQUEST_TIMEOUT: float = 10.0

    LOGGER: int = 20
    LOG_DIRECTORY: str = "logs"
    LOG_FILE: str = "city_explorer.log"
    LOG_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 5

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
