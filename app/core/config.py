# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Env vars (.env), all optional:
      - DATABASE_URL (SQLAlchemy URL, MySQL by default)
      - STORAGE_BACKEND ("local" | "supabase")
      - UPLOAD_DIR / UPLOADS_URL_PREFIX (local blob storage)

    Required only when STORAGE_BACKEND="supabase":
      - SUPABASE_URL
      - SUPABASE_SERVICE_ROLE_KEY
    """

    PROJECT_NAME: str = "Woodland Gallery API"
    API_PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    # Relational store
    DATABASE_URL: str = "mysql+pymysql://root@localhost:3306/nature_gallery"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5

    # Blob storage for uploaded images
    STORAGE_BACKEND: str = "local"
    UPLOAD_DIR: str = "uploads"
    UPLOADS_URL_PREFIX: str = "/uploads"

    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    SUPABASE_BUCKET: str = "gallery"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:8080",
        "http://localhost:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
