from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


# ---------- ENUMS ----------

class NotificationType(str, Enum):
    order = "order"
    payment = "payment"
    system = "system"
    message = "message"


class RecipientRole(str, Enum):
    admin = "admin"
    customer = "customer"


# ---------- MODEL ----------

class Notification(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    recipient_role: RecipientRole = RecipientRole.admin
    type: NotificationType
    message: str

    related_id: Optional[int] = None  # order id for order/payment notifications
    read: bool = False

    created_at: datetime = Field(default_factory=datetime.utcnow)
