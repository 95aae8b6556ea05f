from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime

from storefront.constants.order_status import OrderStatus, PaymentStatus


class OrderItem(SQLModel, table=True):
    __tablename__ = "order_item"
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    product_id: int

    # frozen copy of the cart line, never re-joined against the catalogue
    name: str
    image: Optional[str] = None
    category: str
    unit_type: Optional[str] = None
    purchase_price: float
    quantity: int

    order: Optional["Order"] = Relationship(back_populates="items")


class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_code: str = Field(index=True, unique=True, max_length=4)
    user_id: int = Field(foreign_key="user.id", index=True)

    total_amount: float
    phone_no: Optional[str] = None

    order_status: str = Field(default=OrderStatus.processing.value, index=True)
    payment_status: str = Field(default=PaymentStatus.pending.value, index=True)
    delivered_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    items: List[OrderItem] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "OrderItem.id"},
    )
