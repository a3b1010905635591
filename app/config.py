"""
Configuration de l'application / Application configuration.
Utilise pydantic-settings pour charger depuis .env ou variables d'environnement.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Security Patrol"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True

    # Database - SQLite par défaut pour le développement
    # Database - SQLite by default for development
    DATABASE_URL: str = "sqlite+aiosqlite:///./security_patrol.db"

    # CORS - origines autorisées / allowed origins
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:8081", "http://localhost:19006"]

    # JWT Authentication (emission externe / issued externally)
    SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Rate Limiting
    RATE_LIMIT_LOCATION: str = "60/minute"
    RATE_LIMIT_DEFAULT: str = "120/minute"

    # Stockage photos / Photo storage
    STORAGE_BASE_PATH: str = "data/storage"
    PHOTO_FOLDER: str = "photos"
    MAX_PHOTO_SIZE: int = 5 * 1024 * 1024  # 5 MB

    # Synchronisation des positions / Location sync
    LOCATION_SYNC_ENABLED: bool = False
    LOCATION_SYNC_BATCH_SIZE: int = Field(default=50, gt=0, le=1000)
    LOCATION_SYNC_INTERVAL_SECONDS: int = Field(default=300, gt=0)
    LOCATION_RETENTION_DAYS: int = Field(default=30, gt=0)

    # Rayon de proximite par defaut / Default proximity radius
    DEFAULT_NEARBY_RADIUS_METERS: float = 100.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
