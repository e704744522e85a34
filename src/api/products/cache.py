"""
Products-specific cache operations
"""

from typing import List, Optional

from src.api.products.models import ProductSchema
from src.config.cache_config import CacheAutomationPolicy
from src.config.constants import CacheView
from src.shared.core_cache import CacheKey, CoreCacheClient
from src.shared.utils import get_logger

logger = get_logger(__name__)


class ProductsCache:
    """Products domain cache operations"""

    def __init__(self, cache: CoreCacheClient, policy: CacheAutomationPolicy):
        self.cache = cache
        self.policy = policy

    def generation(self) -> int:
        """Take before a store read whose result will be cached"""
        return self.cache.current_generation()

    def _store(self, key: CacheKey, value, ttl: int, generation: Optional[int]):
        if generation is None:
            self.cache.put(key, value, ttl_seconds=ttl)
        else:
            self.cache.put_if_generation(key, value, ttl, generation)

    # Products are stored as JSON-ready dicts and rebuilt on read, so every
    # caller gets its own copy
    def get_products(self) -> Optional[List[ProductSchema]]:
        """Get the cached product listing"""
        cached, found = self.cache.get(CacheKey.all_products())
        if not found:
            return None
        return [ProductSchema.model_validate(item) for item in cached]

    def set_products(
        self, products: List[ProductSchema], generation: Optional[int] = None
    ):
        """Cache the product listing with the bulk view TTL"""
        self._store(
            CacheKey.all_products(),
            [product.model_dump(mode="json") for product in products],
            self.policy.get_ttl(CacheView.ALL_PRODUCTS),
            generation,
        )

    def get_product(self, product_id: int) -> Optional[ProductSchema]:
        """Get cached product data"""
        cached, found = self.cache.get(CacheKey.product(product_id))
        if not found:
            return None
        return ProductSchema.model_validate(cached)

    def set_product(self, product: ProductSchema, generation: Optional[int] = None):
        """Cache product data with the per-item view TTL"""
        self._store(
            CacheKey.product(product.id),
            product.model_dump(mode="json"),
            self.policy.get_ttl(CacheView.PRODUCT),
            generation,
        )
