from pydantic import BaseModel, Field, model_validator
from typing import List, Optional

from storefront.models.product import UnitType


class CartAddRequest(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)
    unit_type: Optional[UnitType] = None

class CartUpdateRequest(BaseModel):
    quantity: Optional[int] = None
    unit_type: Optional[UnitType] = None

    @model_validator(mode="after")
    def require_a_change(self):
        if self.quantity is None and self.unit_type is None:
            raise ValueError("Provide quantity or unit_type")
        return self

class CartLineResponse(BaseModel):
    cart_item_id: str
    product_id: int
    name: str
    image: Optional[str] = None
    category: str
    unit_type: Optional[UnitType] = None
    quantity: int
    price: float
    total: float

class CartResponse(BaseModel):
    items: List[CartLineResponse]
    total: float
