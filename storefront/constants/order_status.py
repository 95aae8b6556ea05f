from enum import Enum


class OrderStatus(str, Enum):
    processing = "Processing"
    ready_for_pickup = "Ready for Pickup"
    delivered = "Delivered"
    cancelled = "Cancelled"


class PaymentStatus(str, Enum):
    pending = "Pending"
    paid = "Paid"


# a customer may only withdraw an order the shop has not started handing over
USER_CANCELLABLE = {OrderStatus.processing}

TERMINAL_STATUSES = {OrderStatus.delivered, OrderStatus.cancelled}
