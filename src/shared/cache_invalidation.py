"""
Centralized cache invalidation for catalog writes
"""

from typing import Any, Dict, List, Optional

from src.config.constants import CacheScopes, CacheView
from src.shared.core_cache import CacheKey, CoreCacheClient
from src.shared.utils import get_logger

logger = get_logger(__name__)


class CacheInvalidationManager:
    """
    Removes cache entries made stale by a committed write.

    Callers invoke it only after the store commit succeeded. A fault while
    invalidating is logged and swallowed: the commit stands and the stale entry
    expires at its TTL or is replaced by the next refresh.
    """

    def __init__(self, cache: CoreCacheClient):
        self.cache = cache
        self._dependency_map: Dict[CacheView, List[CacheView]] = {
            # Bulk views are built from every product
            CacheView.PRODUCT: [CacheView.ALL_PRODUCTS],
            CacheView.ALL_PRODUCTS: [],
        }

    def invalidate_entity(
        self,
        view: CacheView,
        entity_id: Optional[int] = None,
        scope: CacheScopes = CacheScopes.CATALOG,
    ) -> int:
        """Main entry point for all cache invalidation operations"""
        total_deleted = 0

        try:
            # Step 1: Invalidate the entity's own entry, or its whole view family
            if entity_id is not None:
                total_deleted += int(self.cache.invalidate(CacheKey(view, entity_id)))
            else:
                total_deleted += self.cache.invalidate_prefix(view)

            # Step 2: Views derived from this one
            if scope == CacheScopes.CATALOG:
                total_deleted += self._invalidate_dependencies(view)
        except Exception as e:
            logger.error(
                f"Cache invalidation failed for {view.value}:{entity_id or 'all'}, "
                f"entry stays until TTL expiry: {e}",
                exc_info=True,
            )
            return total_deleted

        logger.info(
            f"Invalidated {total_deleted} cache keys for view: {view.value}, "
            f"entity: {entity_id if entity_id is not None else 'all'}, scope: {scope.value}"
        )
        return total_deleted

    def _invalidate_dependencies(self, changed_view: CacheView) -> int:
        """Invalidate views that depend on the changed view"""
        total_deleted = 0
        for affected_view in self._dependency_map.get(changed_view, []):
            total_deleted += self.cache.invalidate_prefix(affected_view)
        return total_deleted

    # Convenience methods for common operations
    def invalidate_product(self, product_id: int) -> int:
        """Drop a product's own entry and every bulk view containing it"""
        return self.invalidate_entity(CacheView.PRODUCT, product_id, CacheScopes.CATALOG)

    def invalidate_catalog(self) -> int:
        """Drop bulk views only, used when a product is added"""
        return self.invalidate_entity(CacheView.ALL_PRODUCTS, None, CacheScopes.SPECIFIC)

    def get_cache_stats(self) -> Dict[str, Any]:
        return {
            "dependency_map": {
                view.value: [dep.value for dep in deps]
                for view, deps in self._dependency_map.items()
            },
            "cache": self.cache.get_cache_stats(),
        }
