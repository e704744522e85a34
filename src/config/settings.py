import os

from dotenv import load_dotenv

from src.shared.utils import get_logger

logger = get_logger(__name__)


load_dotenv()


class Settings:
    """Application configuration settings."""

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./catalog.db")
    DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
    DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))
    DB_COMMAND_TIMEOUT = int(os.getenv("DB_COMMAND_TIMEOUT", "60"))
    # Schema creation on startup; migrations are handled outside the service
    DB_CREATE_TABLES = os.getenv("DB_CREATE_TABLES", "true").lower() == "true"

    # Cache automation policy, inline JSON takes precedence over the file
    CACHE_POLICY = os.getenv("CACHE_POLICY", None)
    CACHE_POLICY_FILE = os.getenv("CACHE_POLICY_FILE", None)

    # API
    API_TITLE = "Catalog API"
    API_VERSION = "1.0.0"


settings = Settings()
