from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.exceptions import HTTPException

from src.api.admin.routes import admin_router
from src.api.pricing.routes import pricing_router
from src.api.products.repository import ProductRepository
from src.api.products.routes import products_router
from src.config.cache_config import CacheAutomationPolicy, load_cache_policy
from src.config.settings import settings
from src.database.connection import (
    create_engine,
    create_session_factory,
    init_models,
)
from src.dependencies.catalog import build_catalog
from src.middleware.error import http_exception_handler
from src.middleware.timing import add_process_time_header
from src.shared.utils import get_logger

logger = get_logger(__name__)


def create_app(
    engine: AsyncEngine | None = None,
    policy: CacheAutomationPolicy | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db_engine = engine or create_engine()
        if settings.DB_CREATE_TABLES:
            await init_models(db_engine)

        cache_policy = policy or load_cache_policy(
            settings.CACHE_POLICY, settings.CACHE_POLICY_FILE
        )
        catalog = build_catalog(
            ProductRepository(create_session_factory(db_engine)), cache_policy
        )
        app.state.catalog = catalog

        # A store outage here only skips warming; reads populate lazily
        await catalog.cache_warmer.start()
        logger.info(f"Catalog API started in {settings.ENVIRONMENT} mode")
        try:
            yield
        finally:
            await catalog.cache_warmer.stop()
            if engine is None:
                await db_engine.dispose()
            logger.info("Catalog API stopped")

    app = FastAPI(
        title=settings.API_TITLE,
        description="Product catalog with a pre-warmed read cache and price history.",
        version=settings.API_VERSION,
        lifespan=lifespan,
    )

    app.include_router(products_router)
    app.include_router(pricing_router)
    app.include_router(admin_router)

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, http_exception_handler)
    app.middleware("http")(add_process_time_header)

    @app.get("/", tags=["App"])
    async def read_root():
        return {"status": "ok", "service": settings.API_TITLE}

    return app


app = create_app()
