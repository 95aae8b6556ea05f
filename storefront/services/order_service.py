import logging
import random
import string
import threading
from contextlib import contextmanager
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from storefront.errors import ConflictError, NotFoundError, StoreError, TransportError
from storefront.models.notifications import NotificationType
from storefront.models.order import Order, OrderItem
from storefront.models.user import User
from storefront.services.cart_service import CartStore, clear_cart
from storefront.services.notification_service import create_notification
from storefront.services.order_event_service import log_order_event
from storefront.utils.pagination import paginate

logger = logging.getLogger(__name__)

ORDER_CODE_LENGTH = 4
ORDER_CODE_ATTEMPTS = 20
_ORDER_CODE_ALPHABET = string.ascii_uppercase + string.digits

_checkouts_in_flight = set()
_checkouts_lock = threading.Lock()


class OrderItemSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: int
    name: str
    image: Optional[str] = None
    category: str
    unit_type: Optional[str] = None
    purchase_price: float
    quantity: int


def snapshot_items(cart: CartStore) -> List[OrderItemSnapshot]:
    return [
        OrderItemSnapshot(
            product_id=line.product_id,
            name=line.name,
            image=line.image,
            category=line.category,
            unit_type=line.unit_type.value if line.unit_type else None,
            purchase_price=line.price,
            quantity=line.quantity,
        )
        for line in cart
    ]


def order_total(items: List[OrderItemSnapshot]) -> float:
    return sum(item.purchase_price * item.quantity for item in items)


def generate_order_code(session: Session) -> str:
    for _ in range(ORDER_CODE_ATTEMPTS):
        code = "".join(random.choices(_ORDER_CODE_ALPHABET, k=ORDER_CODE_LENGTH))
        taken = session.exec(select(Order.id).where(Order.order_code == code)).first()
        if taken is None:
            return code
    raise TransportError("Could not allocate an order number, please try again")


def create_order(
    session: Session,
    user: User,
    items: List[OrderItemSnapshot],
    total_amount: float,
) -> Order:
    """Persist the order and drop the user's cart rows in one transaction."""
    try:
        code = generate_order_code(session)
        order = Order(
            order_code=code,
            user_id=user.id,
            total_amount=total_amount,
            phone_no=user.phone,
            items=[OrderItem(**item.model_dump()) for item in items],
        )
        session.add(order)
        session.flush()

        clear_cart(session, user.id, commit=False)

        log_order_event(
            session,
            order_id=order.id,
            event_type="order_placed",
            label=f"Order #{code} placed",
            actor=user,
            meta={"total_amount": total_amount, "items": len(items)},
        )
        create_notification(
            session=session,
            type=NotificationType.order,
            message=f"New order #{code} has been placed",
            related_id=order.id,
        )

        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Order creation failed for user {user.id}: {e}")
        raise TransportError("Could not place your order, please try again") from e
    except Exception:
        session.rollback()
        raise

    session.refresh(order)
    return order


@contextmanager
def _checkout_guard(user_id: int):
    with _checkouts_lock:
        if user_id in _checkouts_in_flight:
            raise ConflictError("Checkout already in progress")
        _checkouts_in_flight.add(user_id)
    try:
        yield
    finally:
        with _checkouts_lock:
            _checkouts_in_flight.discard(user_id)


def place_order(
    session: Session,
    cart: CartStore,
    user: User,
    create_order: Callable[..., Order] = create_order,
) -> Order:
    """Turn the user's cart into an order.

    The cart is only cleared once ``create_order`` has succeeded; any failure
    leaves it exactly as it was so the user can simply retry.
    """
    if len(cart) == 0:
        raise ConflictError("Your cart is empty")

    with _checkout_guard(user.id):
        items = snapshot_items(cart)
        total_amount = order_total(items)
        if total_amount != cart.get_total():
            raise ConflictError("Cart changed during checkout, please retry")

        try:
            order = create_order(session, user, items, total_amount)
        except StoreError as e:
            logger.warning(f"Checkout failed for user {user.id}: {e.detail}")
            raise

        cart.clear()

    logger.info(f"Order #{order.order_code} placed by user {user.id}, total {total_amount}")
    return order


# ---------- read paths ----------

def get_order(session: Session, order_ref: str) -> Order:
    order = None
    if len(order_ref) == ORDER_CODE_LENGTH and order_ref.isalnum():
        order = session.exec(
            select(Order).where(Order.order_code == order_ref.upper())
        ).first()
    if order is None and order_ref.isdigit():
        order = session.get(Order, int(order_ref))
    if order is None:
        raise NotFoundError("No Order found with this ID")
    return order


def list_orders(session: Session, user_id: int) -> List[Order]:
    return session.exec(
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc())
    ).all()


def list_all_orders(
    session: Session,
    *,
    order_status: Optional[str] = None,
    payment_status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    serialize: Optional[Callable] = None,
):
    query = select(Order)

    if order_status:
        query = query.where(Order.order_status == order_status)
    if payment_status:
        query = query.where(Order.payment_status == payment_status)

    query = query.order_by(Order.created_at.desc(), Order.id.desc())
    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        serialize=serialize,
    )
