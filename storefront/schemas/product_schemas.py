from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime

from storefront.models.product import Category


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    category: Category

    sub_category: Optional[str] = None
    academic_category: Optional[str] = None
    class_name: Optional[str] = None

    images: List[str] = []

    price: float = Field(..., gt=0)
    market_price: Optional[float] = Field(None, gt=0)
    price_to_sell: Optional[float] = Field(None, gt=0)
    price_per_piece: Optional[float] = Field(None, gt=0)
    price_per_packet: Optional[float] = Field(None, gt=0)

    @model_validator(mode="after")
    def check_category_prices(self):
        if self.category == Category.book:
            if self.price_per_piece is not None or self.price_per_packet is not None:
                raise ValueError("Books are not sold per piece or per packet")
        elif self.market_price is not None or self.price_to_sell is not None:
            raise ValueError("Only books carry a market price and selling price")
        return self


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None

    sub_category: Optional[str] = None
    academic_category: Optional[str] = None
    class_name: Optional[str] = None

    images: Optional[List[str]] = None

    price: Optional[float] = Field(None, gt=0)
    market_price: Optional[float] = Field(None, gt=0)
    price_to_sell: Optional[float] = Field(None, gt=0)
    price_per_piece: Optional[float] = Field(None, gt=0)
    price_per_packet: Optional[float] = Field(None, gt=0)


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    category: Category

    sub_category: Optional[str]
    academic_category: Optional[str]
    class_name: Optional[str]

    images: List[str]

    price: float
    market_price: Optional[float]
    price_to_sell: Optional[float]
    price_per_piece: Optional[float]
    price_per_packet: Optional[float]

    sales_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProductDetail(ProductResponse):
    effective_price: float
    requires_unit_choice: bool
