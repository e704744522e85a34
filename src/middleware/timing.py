import time

from fastapi import Request

from src.shared.utils import get_logger

logger = get_logger(__name__)


async def add_process_time_header(request: Request, call_next):
    """Add process time header and log the request with its cache hit/miss delta."""
    catalog = getattr(request.app.state, "catalog", None)
    hits_before = catalog.cache.hits if catalog else 0
    misses_before = catalog.cache.misses if catalog else 0

    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    cache_info = ""
    if catalog:
        cache_info = (
            f" - Cache hits: {catalog.cache.hits - hits_before}"
            f", misses: {catalog.cache.misses - misses_before}"
        )
    logger.info(
        f"Request: {request.method} {request.url} - Status: {response.status_code}"
        f" - Process Time: {process_time:.4f}s{cache_info}"
    )
    return response
