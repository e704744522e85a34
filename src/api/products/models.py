from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductSchema(BaseModel):
    id: int
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True)


class CreateProductSchema(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    quantity: int = Field(0, ge=0)


class UpdateProductSchema(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=0)


class StockAdjustmentSchema(BaseModel):
    quantity: int = Field(
        ..., description="Units to add, negative values remove stock"
    )
