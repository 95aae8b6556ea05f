from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime


class CartItem(SQLModel, table=True):
    __tablename__ = "cart_item"
    __table_args__ = (UniqueConstraint("user_id", "cart_item_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    cart_item_id: str

    product_id: int = Field(foreign_key="product.id")
    name: str
    image: Optional[str] = None
    category: str
    unit_type: Optional[str] = None

    quantity: int = 1
    price: float
    created_at: datetime = Field(default_factory=datetime.utcnow)
