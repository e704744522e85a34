from typing import Annotated, List

from fastapi import APIRouter, Depends, Path

from src.api.pricing.models import ProductPriceSchema
from src.api.pricing.service import PricingService
from src.core.responses import success_response
from src.dependencies.catalog import get_pricing_service

pricing_router = APIRouter(prefix="/prices", tags=["Pricing"])

PricingServiceDep = Annotated[PricingService, Depends(get_pricing_service)]


@pricing_router.get(
    "/",
    summary="Get the price history of every product",
    response_model=List[ProductPriceSchema],
)
async def get_all_prices(pricing_service: PricingServiceDep):
    prices = await pricing_service.get_all_prices()
    return success_response([p.model_dump(mode="json") for p in prices])


@pricing_router.get(
    "/{product_id}",
    summary="Get the price history of a product",
    response_model=List[ProductPriceSchema],
)
async def get_prices(
    product_id: Annotated[int, Path(ge=1, description="Product ID")],
    pricing_service: PricingServiceDep,
):
    """Oldest change first. Deleted products keep their history."""
    prices = await pricing_service.get_prices(product_id)
    return success_response([p.model_dump(mode="json") for p in prices])
