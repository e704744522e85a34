from typing import List

from src.api.pricing.models import ProductPriceSchema
from src.api.products.repository import ProductRepository
from src.shared.error_handler import ErrorHandler, handle_service_errors
from src.shared.exceptions import ResourceNotFoundException


class PricingService:
    """Read access to the price-history ledger"""

    def __init__(self, repository: ProductRepository):
        self._error_handler = ErrorHandler(__name__)
        self.repository = repository

    @handle_service_errors("retrieving all price history")
    async def get_all_prices(self) -> List[ProductPriceSchema]:
        return await self.repository.read_all_history()

    @handle_service_errors("retrieving product price history")
    async def get_prices(self, product_id: int) -> List[ProductPriceSchema]:
        """Price history for a product, still available after the product is deleted"""
        prices = await self.repository.read_history(product_id)
        if not prices:
            raise ResourceNotFoundException(
                detail=f"No price history for product with ID {product_id}"
            )
        return prices
