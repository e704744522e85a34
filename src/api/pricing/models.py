from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProductPriceSchema(BaseModel):
    id: int
    product_id: int
    price: float = Field(..., ge=0)
    changed_at: datetime

    model_config = ConfigDict(from_attributes=True)
