# shopflow/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - JWT_SECRET (HMAC secret used to verify bearer tokens)

    Optional:
      - DATABASE_URL (defaults to a local SQLite file)
      - LOG_LEVEL, CORS_ORIGINS, page size limits
    """

    PROJECT_NAME: str = "ShopFlow Catalog API"
    API_PREFIX: str = "/api"

    # Database
    DATABASE_URL: str = "sqlite:///./shopflow.db"
    DATABASE_ECHO: bool = False

    # JWT verification (issued by the external auth provider)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    # Catalog query defaults
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    FEATURED_LIMIT: int = 10

    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
