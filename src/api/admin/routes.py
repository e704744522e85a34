from typing import Annotated

from fastapi import APIRouter, Depends

from src.config.cache_config import cache_config
from src.core.responses import success_response
from src.dependencies.catalog import CatalogComponents, get_catalog

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

CatalogDep = Annotated[CatalogComponents, Depends(get_catalog)]


@admin_router.get("/cache/stats", summary="Read cache statistics")
async def get_cache_stats(catalog: CatalogDep):
    return success_response(
        {
            "settings": cache_config.get_all_settings(),
            "invalidation": catalog.invalidation_manager.get_cache_stats(),
            "warmer": catalog.cache_warmer.get_status(),
        }
    )


@admin_router.post("/cache/warm", summary="Re-warm every configured cache view")
async def warm_cache(catalog: CatalogDep):
    """Reload the configured views now; views already refreshing are skipped."""
    summary = await catalog.cache_warmer.warm_all()
    return success_response(summary, message="Cache warm completed")
