"""
Centralized application configuration.

This module uses Pydantic's BaseSettings to load configuration from
environment variables and a .env file, providing a single, type-safe
source of truth for all settings.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- Core API Settings ---
    PROJECT_NAME: str = "Fitness Tracker API"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "production"  # "development" exposes error details in 500 responses
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]
    APP_URL: str = "http://localhost:5173"
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # --- Storage Settings ---
    # "sql" uses DATABASE_URL; "memory" keeps everything in process (demo mode)
    STORAGE_BACKEND: str = "sql"
    DATABASE_URL: str = "sqlite:///./fitness_tracker.db"

    # --- Security Settings ---
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_DAYS: int = 30
    ENCRYPTION_KEY: Optional[str] = None  # Fernet key; required when STORAGE_BACKEND is "sql"

    # --- Wearable Provider (Terra) Settings ---
    TERRA_API_URL: str = "https://api.tryterra.co/v2"
    TERRA_DEV_ID: Optional[str] = None
    TERRA_API_KEY: Optional[str] = None
    TERRA_WEBHOOK_SECRET: Optional[str] = None
    TERRA_TIMEOUT_SECONDS: float = 30.0
    FALLBACK_MAX_HEART_RATE: int = 190  # used when neither the device nor the user's age gives a max
    SYNC_LOOKBACK_DAYS: int = 7

    # --- Pydantic Model Configuration ---
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


# Create a single, globally accessible settings instance
settings = Settings()
