from dataclasses import dataclass

from fastapi import Request

from src.api.pricing.service import PricingService
from src.api.products.cache import ProductsCache
from src.api.products.repository import ProductRepository
from src.api.products.service import ProductService
from src.api.products.services import (
    ProductCoreService,
    ProductInventoryService,
    ProductQueryService,
)
from src.config.cache_config import CacheAutomationPolicy
from src.shared.cache_invalidation import CacheInvalidationManager
from src.shared.cache_warmer import CacheWarmer
from src.shared.core_cache import CoreCacheClient


@dataclass
class CatalogComponents:
    """Everything a request needs, built once per process"""

    cache: CoreCacheClient
    repository: ProductRepository
    invalidation_manager: CacheInvalidationManager
    product_service: ProductService
    pricing_service: PricingService
    cache_warmer: CacheWarmer


def build_catalog(
    repository: ProductRepository,
    policy: CacheAutomationPolicy,
    cache: CoreCacheClient | None = None,
) -> CatalogComponents:
    cache = cache or CoreCacheClient()
    products_cache = ProductsCache(cache, policy)
    invalidation_manager = CacheInvalidationManager(cache)

    product_service = ProductService(
        query_service=ProductQueryService(repository, products_cache),
        core_service=ProductCoreService(repository, invalidation_manager),
        inventory_service=ProductInventoryService(repository, invalidation_manager),
    )

    return CatalogComponents(
        cache=cache,
        repository=repository,
        invalidation_manager=invalidation_manager,
        product_service=product_service,
        pricing_service=PricingService(repository),
        cache_warmer=CacheWarmer(repository, products_cache, policy),
    )


def get_catalog(request: Request) -> CatalogComponents:
    return request.app.state.catalog


def get_product_service(request: Request) -> ProductService:
    return get_catalog(request).product_service


def get_pricing_service(request: Request) -> PricingService:
    return get_catalog(request).pricing_service
