from pydantic import BaseModel, model_validator
from typing import List, Optional
from datetime import datetime

from storefront.constants.order_status import OrderStatus, PaymentStatus


class OrderItemResponse(BaseModel):
    product_id: int
    name: str
    image: Optional[str] = None
    category: str
    unit_type: Optional[str] = None
    purchase_price: float
    quantity: int

    class Config:
        from_attributes = True

class OrderResponse(BaseModel):
    id: int
    order_code: str
    user_id: int
    total_amount: float
    phone_no: Optional[str] = None
    order_status: OrderStatus
    payment_status: PaymentStatus
    delivered_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemResponse]

    class Config:
        from_attributes = True

class OrderSummary(BaseModel):
    id: int
    order_code: str
    user_id: int
    total_amount: float
    order_status: OrderStatus
    payment_status: PaymentStatus
    created_at: datetime

    class Config:
        from_attributes = True

class OrderStatusUpdate(BaseModel):
    order_status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None

    @model_validator(mode="after")
    def require_a_change(self):
        if self.order_status is None and self.payment_status is None:
            raise ValueError("Provide order_status or payment_status")
        return self

class OrderEventResponse(BaseModel):
    event_type: str
    label: str
    meta: Optional[dict] = None
    created_by: str
    created_at: datetime

    class Config:
        from_attributes = True
