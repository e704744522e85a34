from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config.settings import settings
from src.database.base import Base
from src.shared.utils import LOG_LEVEL, get_logger

logger = get_logger(__name__)


def create_engine(database_url: str | None = None) -> AsyncEngine:
    """Create the async engine, with pool settings for server databases"""
    database_url = database_url or settings.DATABASE_URL

    if not database_url:
        raise ValueError("DATABASE_URL is not set in environment variables.")

    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=LOG_LEVEL == "DEBUG")

    engine_kwargs = {}
    if database_url.startswith("postgresql+asyncpg"):
        engine_kwargs["connect_args"] = {
            "command_timeout": settings.DB_COMMAND_TIMEOUT,  # Query timeout in seconds
            "server_settings": {
                "application_name": "catalog_api",  # For monitoring
            },
        }

    return create_async_engine(
        database_url,
        echo=LOG_LEVEL == "DEBUG",
        pool_size=settings.DB_POOL_SIZE,  # Number of permanent connections
        max_overflow=settings.DB_MAX_OVERFLOW,  # Additional connections that can be created
        pool_timeout=settings.DB_POOL_TIMEOUT,  # Seconds to wait for connection from pool
        pool_recycle=settings.DB_POOL_RECYCLE,  # Recycle connections after N seconds
        pool_pre_ping=True,  # Validate connections before using them
        **engine_kwargs,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def init_models(engine: AsyncEngine, drop_tables: bool = False):
    """Create catalog tables, optionally dropping them first"""
    # Registers the mapped classes with Base.metadata
    import src.database.models  # noqa: F401

    async with engine.begin() as conn:
        if drop_tables:
            logger.warning("Dropping all catalog tables")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Catalog tables ready")
