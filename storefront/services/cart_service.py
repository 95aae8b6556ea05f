import hashlib
import logging
from typing import Iterator, List, Optional

from pydantic import BaseModel
from sqlmodel import Session, select

from storefront.errors import NotFoundError, ValidationError
from storefront.models.cart import CartItem
from storefront.models.product import UnitType
from storefront.services.pricing import ProductView, effective_unit_type, resolve_unit_price

logger = logging.getLogger(__name__)


def make_cart_item_id(product_id: int, unit_type: Optional[UnitType]) -> str:
    key = f"{product_id}:{unit_type.value if unit_type else '-'}"
    return hashlib.sha1(key.encode("utf-8")).hexdigest()[:16]


class CartLine(BaseModel):
    cart_item_id: str
    product_id: int
    name: str
    image: Optional[str] = None
    category: str
    unit_type: Optional[UnitType] = None
    quantity: int = 1
    price: float

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class CartStore:
    """One principal's cart.

    Lines keep the order they were added in. Prices are snapshotted when a
    line is created or its unit type changes; quantity changes never touch
    the price.
    """

    def __init__(self, lines: Optional[List[CartLine]] = None):
        self._lines: List[CartLine] = list(lines or [])

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self._lines)

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    def get(self, cart_item_id: str) -> Optional[CartLine]:
        for line in self._lines:
            if line.cart_item_id == cart_item_id:
                return line
        return None

    def add_item(
        self,
        product: ProductView,
        quantity: int = 1,
        unit_type: Optional[UnitType] = None,
    ) -> CartLine:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        unit_type = effective_unit_type(product, unit_type)
        cart_item_id = make_cart_item_id(product.id, unit_type)

        existing = self.get(cart_item_id)
        if existing:
            existing.quantity += quantity
            return existing

        price = resolve_unit_price(product, unit_type)
        if price is None:
            raise ValidationError(f"Product {product.id} has no price")

        line = CartLine(
            cart_item_id=cart_item_id,
            product_id=product.id,
            name=product.name,
            image=product.image,
            category=product.category.value,
            unit_type=unit_type,
            quantity=quantity,
            price=price,
        )
        self._lines.append(line)
        return line

    def update_quantity(self, cart_item_id: str, quantity: int) -> CartLine:
        line = self.get(cart_item_id)
        if line is None:
            raise NotFoundError("Cart item not found")
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        line.quantity = quantity
        return line

    def update_unit_type(
        self,
        cart_item_id: str,
        unit_type: UnitType,
        product: ProductView,
    ) -> CartLine:
        """Switch a line between piece and packet.

        The line is re-keyed to the new unit type and its price re-resolved.
        When the cart already holds this product in the new unit type the
        quantities are merged into that line and this one is dropped. The
        returned line is the one now holding the quantity; its
        ``cart_item_id`` differs from the argument whenever the unit changed.
        """
        line = self.get(cart_item_id)
        if line is None:
            raise NotFoundError("Cart item not found")
        if product.is_book:
            raise ValidationError("Cannot change unit type for a book")
        if product.id != line.product_id:
            raise ValidationError("Product does not match cart item")

        unit_type = effective_unit_type(product, unit_type)
        new_id = make_cart_item_id(line.product_id, unit_type)
        if new_id == line.cart_item_id:
            line.price = resolve_unit_price(product, unit_type)
            return line

        other = self.get(new_id)
        if other is not None:
            other.quantity += line.quantity
            self._lines = [item for item in self._lines if item is not line]
            return other

        line.cart_item_id = new_id
        line.unit_type = unit_type
        line.price = resolve_unit_price(product, unit_type)
        return line

    def remove_item(self, cart_item_id: str) -> None:
        self._lines = [line for line in self._lines if line.cart_item_id != cart_item_id]

    def get_total(self) -> float:
        return sum(line.line_total for line in self._lines)

    def clear(self) -> None:
        self._lines = []

    def snapshot(self) -> List[dict]:
        return [line.model_dump() for line in self._lines]


# ---------- persistence ----------

def _line_from_row(row: CartItem) -> CartLine:
    return CartLine(
        cart_item_id=row.cart_item_id,
        product_id=row.product_id,
        name=row.name,
        image=row.image,
        category=row.category,
        unit_type=UnitType(row.unit_type) if row.unit_type else None,
        quantity=row.quantity,
        price=row.price,
    )


def _get_row(session: Session, user_id: int, cart_item_id: str) -> Optional[CartItem]:
    return session.exec(
        select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.cart_item_id == cart_item_id,
        )
    ).first()


def load_cart(session: Session, user_id: int) -> CartStore:
    rows = session.exec(
        select(CartItem)
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.created_at, CartItem.id)
    ).all()
    return CartStore([_line_from_row(row) for row in rows])


def save_cart_line(session: Session, user_id: int, line: CartLine) -> None:
    row = _get_row(session, user_id, line.cart_item_id)
    if row is None:
        row = CartItem(user_id=user_id, cart_item_id=line.cart_item_id,
                       product_id=line.product_id, name=line.name,
                       category=line.category, price=line.price)

    row.image = line.image
    row.unit_type = line.unit_type.value if line.unit_type else None
    row.quantity = line.quantity
    row.price = line.price

    session.add(row)
    session.commit()


def delete_cart_line(session: Session, user_id: int, cart_item_id: str, commit: bool = True) -> None:
    row = _get_row(session, user_id, cart_item_id)
    if row:
        session.delete(row)
        if commit:
            session.commit()


def clear_cart(session: Session, user_id: int, commit: bool = True) -> None:
    items = session.exec(
        select(CartItem).where(CartItem.user_id == user_id)
    ).all()

    for item in items:
        session.delete(item)

    if commit:
        session.commit()
    logger.info(f"Cleared {len(items)} cart lines for user {user_id}")
