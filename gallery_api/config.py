"""
Configuration management for the gallery API.
Uses Pydantic Settings for environment variable management.
"""
from pydantic import BaseModel
from pydantic_settings import BaseSettings
from typing import List, Optional


class BootstrapConfig(BaseModel):
    """
    Startup configuration passed explicitly into database initialization.
    Describes the single admin identity and whether sample content is seeded.
    """
    admin_username: Optional[str] = None
    admin_password: Optional[str] = None
    admin_password_hash: Optional[str] = None
    seed_gallery: bool = True


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Media Gallery API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Public gallery browsing API with an authenticated admin console"

    # "production" enables secure cookies and hides stack traces
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS Configuration
    # Credentials (session cookie) are allowed, so origins must be explicit
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:8080",
    ]

    # Database Configuration
    # postgresql+asyncpg://... in production, SQLite for local development
    DATABASE_URL: str = "sqlite+aiosqlite:///./gallery.db"

    # Session Configuration
    # SESSION_SECRET signs the session cookie; use a long random value in production
    SESSION_SECRET: str = "change-this-session-secret-in-production"
    SESSION_COOKIE_NAME: str = "gallery_session"
    SESSION_TTL_HOURS: int = 24
    SESSION_BACKEND: str = "database"  # "database" or "memory"

    # Admin bootstrap
    # Either ADMIN_PASSWORD (plain, hashed at startup) or ADMIN_PASSWORD_HASH (bcrypt)
    ADMIN_USERNAME: str = ""
    ADMIN_PASSWORD: str = ""
    ADMIN_PASSWORD_HASH: str = ""

    # Seed the sample collection when the gallery table is empty
    SEED_GALLERY: bool = True

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_GENERAL: str = "100/15 minutes"
    RATE_LIMIT_LOGIN: str = "10/hour"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def session_cookie_secure(self) -> bool:
        return self.is_production

    def bootstrap_config(self) -> BootstrapConfig:
        """Build the explicit startup configuration from environment settings."""
        return BootstrapConfig(
            admin_username=self.ADMIN_USERNAME or None,
            admin_password=self.ADMIN_PASSWORD or None,
            admin_password_hash=self.ADMIN_PASSWORD_HASH or None,
            seed_gallery=self.SEED_GALLERY,
        )


# Global settings instance
settings = Settings()
