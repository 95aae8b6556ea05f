import logging
from datetime import datetime
from typing import Optional

from sqlmodel import Session

from storefront.constants.order_status import (
    TERMINAL_STATUSES,
    USER_CANCELLABLE,
    OrderStatus,
    PaymentStatus,
)
from storefront.errors import ForbiddenError, ValidationError
from storefront.models.order import Order
from storefront.models.product import Product
from storefront.models.user import User
from storefront.services.order_event_service import delete_order_timeline, log_order_event

logger = logging.getLogger(__name__)


def _is_completed(order: Order) -> bool:
    return (
        order.order_status == OrderStatus.delivered.value
        and order.payment_status == PaymentStatus.paid.value
    )


def user_cancel(session: Session, order: Order, user: User) -> Order:
    """Customer-initiated cancellation, only allowed while the order is Processing."""
    if order.user_id != user.id:
        raise ForbiddenError("You are not authorized to cancel this order")

    if OrderStatus(order.order_status) not in USER_CANCELLABLE:
        raise ValidationError(f"Cannot cancel order. Current status: {order.order_status}")

    previous = order.order_status
    order.order_status = OrderStatus.cancelled.value
    order.updated_at = datetime.utcnow()
    session.add(order)

    log_order_event(
        session,
        order_id=order.id,
        event_type="cancelled",
        label="Order cancelled by customer",
        actor=user,
        meta={"from": previous},
    )
    session.commit()
    session.refresh(order)

    logger.info(f"Order #{order.order_code} cancelled by user {user.id}")
    return order


def _record_sales(session: Session, order: Order) -> None:
    for item in order.items:
        product = session.get(Product, item.product_id)
        if product is None:
            continue
        product.sales_count += 1
        session.add(product)


def staff_update(
    session: Session,
    order: Order,
    actor: User,
    *,
    order_status: Optional[OrderStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
) -> Order:
    """Administrative update of either status axis.

    Staff are not held to the forward-only path customers see; every change
    is written to the order timeline instead.
    """
    was_completed = _is_completed(order)
    changes = {}

    if order_status is not None and order_status.value != order.order_status:
        previous = order.order_status
        if OrderStatus(previous) in TERMINAL_STATUSES:
            logger.warning(
                f"Order #{order.order_code} reopened from {previous} "
                f"to {order_status.value} by admin {actor.id}"
            )
        order.order_status = order_status.value
        if order_status == OrderStatus.delivered and order.delivered_at is None:
            order.delivered_at = datetime.utcnow()
        changes["order_status"] = {"from": previous, "to": order_status.value}
        log_order_event(
            session,
            order_id=order.id,
            event_type="status_changed",
            label=f"Status changed to {order_status.value}",
            actor=actor,
            meta=changes["order_status"],
        )

    if payment_status is not None and payment_status.value != order.payment_status:
        previous = order.payment_status
        order.payment_status = payment_status.value
        changes["payment_status"] = {"from": previous, "to": payment_status.value}
        log_order_event(
            session,
            order_id=order.id,
            event_type="payment_status_changed",
            label=f"Payment marked {payment_status.value}",
            actor=actor,
            meta=changes["payment_status"],
        )

    if not changes:
        return order

    # sales are counted once, when an order first becomes delivered and paid
    if not was_completed and _is_completed(order):
        _record_sales(session, order)

    order.updated_at = datetime.utcnow()
    session.add(order)
    session.commit()
    session.refresh(order)

    logger.info(f"Order #{order.order_code} updated by admin {actor.id}: {changes}")
    return order


def staff_set_status(session: Session, order: Order, status: OrderStatus, actor: User) -> Order:
    return staff_update(session, order, actor, order_status=status)


def set_payment_status(session: Session, order: Order, status: PaymentStatus, actor: User) -> Order:
    return staff_update(session, order, actor, payment_status=status)


def delete_order(session: Session, order: Order, actor: User) -> None:
    code = order.order_code
    delete_order_timeline(session, order.id)
    session.delete(order)
    session.commit()
    logger.info(f"Order #{code} deleted by admin {actor.id}")
