"""
Configuration management for the FastAPI application.
Uses Pydantic Settings for environment variable management.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Mediahub API"
    API_VERSION: str = "0.1.0"
    API_DESCRIPTION: str = "Backend API for texts, images, timeline and gallery events"

    # CORS Configuration
    # For development, you can use ["*"] to allow all origins (not recommended for production)
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    LOG_LEVEL: str = "INFO"

    # Database Configuration
    # Empty means an in-memory SQLite database (development and tests only)
    DATABASE_URL: str = ""

    # Object storage: "cloudinary" or "memory"
    BLOB_BACKEND: str = "cloudinary"
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""

    # Upload limits
    MAX_IMAGE_BYTES: int = 10 * 1024 * 1024
    CONVERT_UPLOADS_TO_WEBP: bool = False

    # Admin Password
    # Should be bcrypt hashed password (see scripts/generate_password_hash.py)
    ADMIN_PASSWORD_HASH: str = ""
    AUTH_ENABLED: bool = True

    # JWT Configuration
    # SECRET_KEY should be a long random string (e.g., generated with: openssl rand -hex 32)
    JWT_SECRET_KEY: str = "your-secret-key-change-this-in-production-use-openssl-rand-hex-32"

    # Third-party events listing
    EVENTS_API_BASE_URL: str = "https://eventos.grupysanca.com.br/api/v1"
    EVENTS_WEB_BASE_URL: str = "https://eventos.grupysanca.com.br"
    EVENTS_API_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings


# Global settings instance
settings = Settings()
