from src.api.products.models import ProductSchema
from src.api.products.repository import ProductRepository
from src.shared.cache_invalidation import CacheInvalidationManager
from src.shared.error_handler import ErrorHandler, handle_service_errors
from src.shared.exceptions import ResourceNotFoundException, ValidationException
from src.shared.utils import get_logger

logger = get_logger(__name__)


class ProductInventoryService:
    """Stock adjustments; quantity changes never touch the price ledger"""

    def __init__(
        self,
        repository: ProductRepository,
        invalidation_manager: CacheInvalidationManager,
    ):
        self._error_handler = ErrorHandler(__name__)
        self.repository = repository
        self.invalidation_manager = invalidation_manager

    @handle_service_errors("adjusting product stock")
    async def add_stock(self, product_id: int, quantity_delta: int) -> ProductSchema:
        """Add (or with a negative delta, remove) units of stock"""
        if quantity_delta is None:
            raise ValidationException(detail="Stock adjustment quantity is required")

        async with self.repository.unit_of_work() as session:
            product = await self.repository.get_for_update(session, product_id)
            if not product:
                raise ResourceNotFoundException(
                    detail=f"Product with ID {product_id} not found"
                )
            if product.quantity + quantity_delta < 0:
                raise ValidationException(
                    detail=f"Insufficient stock: {product.quantity} available, "
                    f"adjustment of {quantity_delta} requested"
                )

            updated_product = await self.repository.adjust_quantity(
                session, product, quantity_delta
            )

        # Commit has completed at this point
        self.invalidation_manager.invalidate_product(product_id)
        logger.info(
            f"Adjusted stock for product {product_id} by {quantity_delta}, "
            f"now {updated_product.quantity}"
        )
        return updated_product
