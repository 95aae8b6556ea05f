"""Price resolution for catalogue products.

Books are sold at a single price (selling price, falling back to the list
price and then the base price). Everything else may be sold by the piece or
by the packet; when a product carries both prices the customer has to pick
one before it goes into the cart.
"""
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

from storefront.models.product import Category, Product, UnitType


class BookPricing(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["book"] = "book"
    price: float
    price_to_sell: Optional[float] = None
    market_price: Optional[float] = None


class UnitPricing(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["unit"] = "unit"
    price: float
    price_per_piece: Optional[float] = None
    price_per_packet: Optional[float] = None

    @property
    def offered_units(self) -> list[UnitType]:
        units = []
        if self.price_per_piece is not None:
            units.append(UnitType.piece)
        if self.price_per_packet is not None:
            units.append(UnitType.packet)
        return units


Pricing = Union[BookPricing, UnitPricing]


class ProductView(BaseModel):
    """Read-only projection of a product, as the cart sees it."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    category: Category
    image: Optional[str] = None
    pricing: Pricing

    @classmethod
    def from_product(cls, product: Product) -> "ProductView":
        return cls(
            id=product.id,
            name=product.name,
            category=product.category,
            image=product.thumbnail,
            pricing=pricing_for(product),
        )

    @property
    def is_book(self) -> bool:
        return isinstance(self.pricing, BookPricing)


def pricing_for(product: Product) -> Pricing:
    if product.category == Category.book:
        return BookPricing(
            price=product.price,
            price_to_sell=product.price_to_sell,
            market_price=product.market_price,
        )
    return UnitPricing(
        price=product.price,
        price_per_piece=product.price_per_piece,
        price_per_packet=product.price_per_packet,
    )


def _first_defined(*values):
    for value in values:
        if value is not None:
            return value
    return None


def resolve_unit_price(
    product: Union[ProductView, Product, Pricing],
    unit_type: Optional[UnitType] = None,
) -> Optional[float]:
    if isinstance(product, Product):
        pricing = pricing_for(product)
    elif isinstance(product, ProductView):
        pricing = product.pricing
    else:
        pricing = product

    if isinstance(pricing, BookPricing):
        return _first_defined(pricing.price_to_sell, pricing.market_price, pricing.price)

    if isinstance(pricing, UnitPricing):
        offered = pricing.offered_units
        if len(offered) == 1:
            # a single offered unit wins whatever was asked for
            unit_type = offered[0]
        if unit_type == UnitType.packet:
            return _first_defined(pricing.price_per_packet, pricing.price)
        return _first_defined(pricing.price_per_piece, pricing.price)

    raise TypeError(f"Unknown pricing variant: {type(pricing).__name__}")


def requires_unit_choice(product: Union[ProductView, Product]) -> bool:
    """True when the customer must choose between piece and packet."""
    pricing = product.pricing if isinstance(product, ProductView) else pricing_for(product)
    return isinstance(pricing, UnitPricing) and len(pricing.offered_units) == 2


def effective_unit_type(
    product: Union[ProductView, Product],
    requested: Optional[UnitType] = None,
) -> Optional[UnitType]:
    pricing = product.pricing if isinstance(product, ProductView) else pricing_for(product)

    if isinstance(pricing, BookPricing):
        return None

    offered = pricing.offered_units
    if not offered:
        return None
    if len(offered) == 1:
        return offered[0]
    return requested or UnitType.piece
