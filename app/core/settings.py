"""
Core settings and environment variables for Mangrove Watch.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Mangrove Watch"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # CORS - client origins allowed to access this API (comma separated)
    CORS_ORIGINS: str = "http://localhost:8081,http://localhost:19006,http://127.0.0.1:8081"

    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON
    FIREBASE_STORAGE_BUCKET: Optional[str] = None

    # Mock DB mode for local development without Firebase credentials
    # MOCK_DB_PATH=":memory:" keeps everything in process (used by tests)
    USE_MOCK_DB: bool = False
    MOCK_DB_PATH: str = "./mock_db.json"
    MOCK_STORAGE_PATH: str = "./mock_storage"

    # Geocoding (address resolution for incident locations)
    # - GEOCODING_PROVIDER: "nominatim" (default, no API key), "google" or "none"
    # - GOOGLE_MAPS_API_KEY: optional; only used when provider is "google"
    GEOCODING_PROVIDER: str = "nominatim"
    GOOGLE_MAPS_API_KEY: Optional[str] = None
    REVERSE_GEOCODE_ON_SUBMIT: bool = True
    GEOCODING_LANGUAGE: str = "en"
    GEOCODING_TIMEOUT_SECONDS: float = 3.0

    # Gamification
    REPORT_POINTS_AWARD: int = 50

    # Auth
    SESSION_TTL_HOURS: int = 24

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
