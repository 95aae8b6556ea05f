import pytest

from storefront.models.product import Category, Product, UnitType
from storefront.services.pricing import (
    BookPricing,
    ProductView,
    UnitPricing,
    effective_unit_type,
    pricing_for,
    requires_unit_choice,
    resolve_unit_price,
)


def book(**prices):
    return ProductView(id=1, name="Concepts of Physics", category=Category.book,
                       pricing=BookPricing(**prices))


def stationery(**prices):
    return ProductView(id=2, name="Gel pen", category=Category.stationery,
                       pricing=UnitPricing(**prices))


@pytest.mark.parametrize(
    "prices, expected",
    [
        ({"price": 700, "price_to_sell": 450, "market_price": 600}, 450),
        ({"price": 700, "market_price": 600}, 600),
        ({"price": 700}, 700),
        ({"price": 700, "price_to_sell": 450}, 450),
    ],
)
def test_book_price_falls_back_from_selling_to_market_to_base(prices, expected):
    assert resolve_unit_price(book(**prices)) == expected


@pytest.mark.parametrize("unit", [None, UnitType.piece, UnitType.packet])
def test_book_ignores_unit_type(unit):
    assert resolve_unit_price(book(price=700, price_to_sell=450), unit) == 450


def test_both_unit_prices_follow_requested_unit():
    pen = stationery(price=20, price_per_piece=15, price_per_packet=120)

    assert resolve_unit_price(pen, UnitType.packet) == 120
    assert resolve_unit_price(pen, UnitType.piece) == 15
    assert resolve_unit_price(pen) == 15


@pytest.mark.parametrize("unit", [None, UnitType.piece, UnitType.packet])
def test_single_unit_price_wins_regardless_of_request(unit):
    packet_only = stationery(price=20, price_per_packet=120)
    piece_only = stationery(price=20, price_per_piece=15)

    assert resolve_unit_price(packet_only, unit) == 120
    assert resolve_unit_price(piece_only, unit) == 15


def test_no_unit_prices_uses_base_price():
    gift = stationery(price=250)
    assert resolve_unit_price(gift, UnitType.packet) == 250
    assert resolve_unit_price(gift) == 250


def test_resolver_accepts_product_rows():
    product = Product(id=9, name="Football", category=Category.sport, price=900,
                      price_per_piece=850, images=[])

    assert isinstance(pricing_for(product), UnitPricing)
    assert resolve_unit_price(product) == 850


def test_unit_choice_required_only_when_both_prices_exist():
    assert requires_unit_choice(stationery(price=20, price_per_piece=15, price_per_packet=120))
    assert not requires_unit_choice(stationery(price=20, price_per_packet=120))
    assert not requires_unit_choice(stationery(price=20))
    assert not requires_unit_choice(book(price=700, price_to_sell=450))


def test_effective_unit_type_policy():
    both = stationery(price=20, price_per_piece=15, price_per_packet=120)

    assert effective_unit_type(both, UnitType.packet) == UnitType.packet
    assert effective_unit_type(both) == UnitType.piece
    assert effective_unit_type(stationery(price=20, price_per_packet=120), UnitType.piece) == UnitType.packet
    assert effective_unit_type(stationery(price=20), UnitType.packet) is None
    assert effective_unit_type(book(price=700), UnitType.packet) is None


def test_product_view_uses_first_image_as_thumbnail():
    product = Product(id=3, name="Notebook", category=Category.stationery, price=60,
                      images=["front.jpg", "back.jpg"])

    view = ProductView.from_product(product)

    assert view.image == "front.jpg"
    assert not view.is_book
