from typing import List

from src.api.products.cache import ProductsCache
from src.api.products.models import ProductSchema
from src.api.products.repository import ProductRepository
from src.shared.error_handler import ErrorHandler, handle_service_errors
from src.shared.exceptions import ResourceNotFoundException, ValidationException


class ProductQueryService:
    """Read-through access to the catalog: cache first, store on a miss"""

    def __init__(self, repository: ProductRepository, products_cache: ProductsCache):
        self._error_handler = ErrorHandler(__name__)
        self.repository = repository
        self.products_cache = products_cache

    @handle_service_errors("retrieving all products")
    async def get_all_products(self) -> List[ProductSchema]:
        cached_products = self.products_cache.get_products()
        if cached_products is not None:
            return cached_products

        generation = self.products_cache.generation()
        products = await self.repository.read_all()
        self.products_cache.set_products(products, generation)
        return products

    @handle_service_errors("retrieving product by ID")
    async def get_product_by_id(self, product_id: int) -> ProductSchema:
        """Get product by ID, raising not-found for unknown products."""
        if product_id <= 0:
            raise ValidationException(detail="Product ID must be a positive integer")

        cached_product = self.products_cache.get_product(product_id)
        if cached_product:
            return cached_product

        generation = self.products_cache.generation()
        product = await self.repository.read_one(product_id)
        if not product:
            # Absence is not cached so a later create is visible immediately
            raise ResourceNotFoundException(
                detail=f"Product with ID {product_id} not found"
            )

        # Dropped if a write invalidated the product while it was being read
        self.products_cache.set_product(product, generation)
        return product
