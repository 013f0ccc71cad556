"""
Application settings
Read from environment variables or .env
"""
from typing import List

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "CMS Admin"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./cms_admin.db"

    # JWT (tokens are issued by the login service, only verified here)
    SECRET_KEY: str = "cms-admin-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # Locales
    PRIMARY_LOCALE: str = "ko"
    LOCALES: List[str] = ["ko", "en"]

    # Menu updates: number of store calls issued concurrently per mutation.
    # Only used with stores that allow concurrent writes.
    MENU_FANOUT_WORKERS: int = 4

    # Seed a default navigation into empty sites at startup
    SEED_DEFAULT_MENUS: bool = False

    CORS_ORIGINS: List[str] = ["*"]

    model_config = ConfigDict(env_file=".env", case_sensitive=True)


# Global settings instance
settings = Settings()
