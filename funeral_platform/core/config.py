"""
Application configuration using Pydantic Settings
"""

from pathlib import Path
from typing import Optional
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Funeral Services Platform"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    PUBLIC_BASE_URL: str = "http://localhost:10000"

    # API
    ALLOWED_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:10000",
    ]

    # Storage
    DATA_DIR: Path = Path("data")
    UPLOADS_DIR: Path = Path("uploads")
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # JWT
    JWT_SECRET_KEY: str = "jwt-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    TENANT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    # Tenants
    TRIAL_DAYS: int = 14
    RESET_TOKEN_EXPIRE_MINUTES: int = 30
    PAYMENT_WEBHOOK_SECRET: Optional[str] = None

    # Super-admin seed, applied only when no super-admin exists yet
    SUPERADMIN_EMAIL: Optional[str] = None
    SUPERADMIN_PASSWORD: Optional[str] = None

    # SMTP (email is disabled while SMTP_HOST is unset)
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM: str = "no-reply@funeral-platform.local"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def tenants_path(self) -> Path:
        return self.DATA_DIR / "tenants.json"

    @property
    def admin_keys_path(self) -> Path:
        return self.DATA_DIR / "admin_keys.json"

    @property
    def superadmins_path(self) -> Path:
        return self.DATA_DIR / "superadmins.json"

    def collection_path(self, name: str) -> Path:
        return self.DATA_DIR / f"{name}.json"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
