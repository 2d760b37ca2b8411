"""Application configuration using Pydantic Settings"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    environment: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_command_timeout: float = 30.0

    # Security
    secret_key: str
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Logging
    log_level: str = "INFO"

    # Coordinates and region catalog
    coordinate_precision: int = 6
    region_srid: int = 4326

    # Photo attachments
    max_photo_size_mb: int = 50
    max_photos_per_project: int = 20

    # Map view handed to the browser
    map_center_latitude: float = 44.053592
    map_center_longitude: float = -120.379945
    map_zoom: int = 7
    map_max_zoom: int = 17
    map_tile_url: str = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
    map_attribution: str = (
        'Map data &copy; <a href="http://openstreetmap.org">OpenStreetMap</a> contributors'
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def max_photo_size_bytes(self) -> int:
        """Photo size ceiling in bytes"""
        return self.max_photo_size_mb * 1024 * 1024


# Global settings instance
settings = Settings()
