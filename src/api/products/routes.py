from typing import Annotated, List

from fastapi import APIRouter, Body, Depends, Path, status

from src.api.products.models import (
    CreateProductSchema,
    ProductSchema,
    StockAdjustmentSchema,
    UpdateProductSchema,
)
from src.api.products.service import ProductService
from src.core.responses import success_response
from src.dependencies.catalog import get_product_service

products_router = APIRouter(prefix="/products", tags=["Products"])

ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
ProductId = Annotated[int, Path(ge=1, description="Product ID")]


@products_router.get(
    "/",
    summary="Get all products",
    response_model=List[ProductSchema],
)
async def get_all_products(product_service: ProductServiceDep):
    """Return the whole catalog, served from the read cache when warm."""
    products = await product_service.get_all_products()
    return success_response([p.model_dump(mode="json") for p in products])


@products_router.get(
    "/{product_id}",
    summary="Get a product by ID",
    response_model=ProductSchema,
)
async def get_product(product_id: ProductId, product_service: ProductServiceDep):
    product = await product_service.get_product(product_id)
    return success_response(product.model_dump(mode="json"))


@products_router.post(
    "/",
    summary="Create a new product",
    response_model=ProductSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    product_data: CreateProductSchema, product_service: ProductServiceDep
):
    """Create a product. Its initial price is recorded in the price history."""
    product = await product_service.create_product(product_data)
    return success_response(
        product.model_dump(mode="json"),
        message="Product created",
        status_code=status.HTTP_201_CREATED,
    )


@products_router.put(
    "/{product_id}",
    summary="Update a product",
    response_model=ProductSchema,
)
async def update_product(
    product_id: ProductId,
    product_data: UpdateProductSchema,
    product_service: ProductServiceDep,
):
    """
    Update any subset of a product's fields.

    A price change is appended to the product's price history.
    """
    product = await product_service.update_product(product_id, product_data)
    return success_response(product.model_dump(mode="json"), message="Product updated")


@products_router.delete(
    "/{product_id}",
    summary="Delete a product",
    response_model=ProductSchema,
)
async def delete_product(product_id: ProductId, product_service: ProductServiceDep):
    """Delete a product. Its price history stays available."""
    product = await product_service.delete_product(product_id)
    return success_response(product.model_dump(mode="json"), message="Product deleted")


@products_router.post(
    "/{product_id}/stock",
    summary="Adjust a product's stock",
    response_model=ProductSchema,
)
async def add_stock(
    product_id: ProductId,
    product_service: ProductServiceDep,
    adjustment: StockAdjustmentSchema = Body(...),
):
    product = await product_service.add_stock(product_id, adjustment.quantity)
    return success_response(product.model_dump(mode="json"), message="Stock adjusted")
