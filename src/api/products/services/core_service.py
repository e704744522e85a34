from datetime import datetime, timezone

from src.api.products.models import (
    CreateProductSchema,
    ProductSchema,
    UpdateProductSchema,
)
from src.api.products.repository import ProductRepository
from src.shared.cache_invalidation import CacheInvalidationManager
from src.shared.error_handler import ErrorHandler, handle_service_errors
from src.shared.exceptions import ResourceNotFoundException, ValidationException


class ProductCoreService:
    """
    Handles product writes.

    Each write commits the product change and its price-ledger entry in one
    transaction, then invalidates the affected cache entries. Nothing is
    invalidated when the commit fails.
    """

    def __init__(
        self,
        repository: ProductRepository,
        invalidation_manager: CacheInvalidationManager,
    ):
        self._error_handler = ErrorHandler(__name__)
        self.repository = repository
        self.invalidation_manager = invalidation_manager

    @handle_service_errors("creating product")
    async def create_product(self, product_data: CreateProductSchema) -> ProductSchema:
        """Create a new product and record its initial price"""
        if product_data is None:
            raise ValidationException(detail="Product data is required")
        if not product_data.name.strip():
            raise ValidationException(detail="Product name is required")
        if not product_data.description.strip():
            raise ValidationException(detail="Product description is required")

        async with self.repository.unit_of_work() as session:
            new_product = await self.repository.create(
                session,
                {
                    "name": product_data.name.strip(),
                    "description": product_data.description.strip(),
                    "price": product_data.price,
                    "quantity": product_data.quantity,
                },
            )
            await self.repository.append_history(
                session, new_product.id, new_product.price, datetime.now(timezone.utc)
            )

        self.invalidation_manager.invalidate_catalog()
        return new_product

    @handle_service_errors("updating product")
    async def update_product(
        self, product_id: int, product_data: UpdateProductSchema
    ) -> ProductSchema:
        """Apply a partial update, recording the price when it changes"""
        if product_data is None:
            raise ValidationException(detail="The product update cannot be null")

        update_dict = product_data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_dict:
            raise ValidationException(detail="No fields provided for update")
        for field in ("name", "description"):
            if field in update_dict:
                update_dict[field] = update_dict[field].strip()
                if not update_dict[field]:
                    raise ValidationException(detail=f"Product {field} cannot be empty")

        async with self.repository.unit_of_work() as session:
            product = await self.repository.get_for_update(session, product_id)
            if not product:
                raise ResourceNotFoundException(
                    detail=f"Product with ID {product_id} not found"
                )

            previous_price = product.price
            updated_product = await self.repository.update(session, product, update_dict)

            if updated_product.price != previous_price:
                await self.repository.append_history(
                    session,
                    product_id,
                    updated_product.price,
                    datetime.now(timezone.utc),
                )

        self.invalidation_manager.invalidate_product(product_id)
        return updated_product

    @handle_service_errors("deleting product")
    async def delete_product(self, product_id: int) -> ProductSchema:
        """Delete a product, keeping its price history"""
        async with self.repository.unit_of_work() as session:
            deleted_product = await self.repository.delete(session, product_id)
            if not deleted_product:
                raise ResourceNotFoundException(
                    detail=f"Product with ID {product_id} not found"
                )

        self.invalidation_manager.invalidate_product(product_id)
        return deleted_product
