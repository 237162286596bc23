"""Application configuration."""
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.
    
    Environment variables take precedence over .env file.
    """
    
    APP_NAME: str = "Stockroom"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # Database
    DATABASE_URL: str = "sqlite:///./stockroom.db"
    
    # Shelf view behaviour
    LONG_PRESS_TIMEOUT_MS: int = 300
    DEFAULT_TRAY_PADDING: int = 1
    # Deepest layer loaded when a warehouse is opened
    DEFAULT_LOAD_LEVEL: str = "shelf"
    
    model_config = SettingsConfigDict(
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
