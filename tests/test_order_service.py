import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from storefront.constants.order_status import OrderStatus, PaymentStatus
from storefront.errors import ConflictError, NotFoundError, TransportError
from storefront.models.cart import CartItem
from storefront.models.notifications import Notification
from storefront.models.order_event import OrderEvent
from storefront.models.product import Category, UnitType
from storefront.models.user import User
from storefront.services import order_service
from storefront.services.cart_service import CartStore, delete_cart_line, load_cart, save_cart_line
from storefront.services.order_service import (
    create_order,
    get_order,
    list_all_orders,
    list_orders,
    place_order,
    snapshot_items,
)
from storefront.services.pricing import ProductView


@pytest.fixture
def customer(make_user, session):
    return session.get(User, make_user().id)


@pytest.fixture
def book(make_product):
    return make_product(Category.book, price=700, price_to_sell=450, market_price=600,
                        name="Concepts of Physics")


@pytest.fixture
def pens(make_product):
    return make_product(Category.stationery, price=20, price_per_piece=15,
                        price_per_packet=120, name="Gel pen")


@pytest.fixture
def filled_cart(session, customer, book, pens):
    cart = CartStore()
    for line in (
        cart.add_item(ProductView.from_product(book), 1),
        cart.add_item(ProductView.from_product(pens), 3, UnitType.packet),
    ):
        save_cart_line(session, customer.id, line)
    return load_cart(session, customer.id)


def test_place_order_snapshots_cart_and_clears_it(session, customer, filled_cart):
    total_before = filled_cart.get_total()

    order = place_order(session, filled_cart, customer)

    assert order.total_amount == total_before == 810
    assert order.order_status == OrderStatus.processing.value
    assert order.payment_status == PaymentStatus.pending.value
    assert len(order.order_code) == 4
    assert order.phone_no == customer.phone
    assert [(i.name, i.purchase_price, i.quantity, i.unit_type) for i in order.items] == [
        ("Concepts of Physics", 450, 1, None),
        ("Gel pen", 120, 3, "Packet"),
    ]

    assert len(filled_cart) == 0
    assert session.exec(select(CartItem).where(CartItem.user_id == customer.id)).all() == []


def test_place_order_records_notification_and_event(session, customer, filled_cart):
    order = place_order(session, filled_cart, customer)

    notification = session.exec(select(Notification)).one()
    assert notification.message == f"New order #{order.order_code} has been placed"
    assert notification.related_id == order.id

    event = session.exec(select(OrderEvent).where(OrderEvent.order_id == order.id)).one()
    assert event.event_type == "order_placed"
    assert event.created_by == f"user:{customer.id}"


@pytest.mark.parametrize(
    "quantities",
    [
        {"book": 1},
        {"book": 3, "piece": 7},
        {"piece": 1, "packet": 2},
        {"book": 2, "piece": 11, "packet": 5},
    ],
)
def test_order_total_matches_cart_total(session, customer, book, pens, quantities):
    cart = CartStore()
    book_view = ProductView.from_product(book)
    pen_view = ProductView.from_product(pens)
    if "book" in quantities:
        cart.add_item(book_view, quantities["book"])
    if "piece" in quantities:
        cart.add_item(pen_view, quantities["piece"], UnitType.piece)
    if "packet" in quantities:
        cart.add_item(pen_view, quantities["packet"], UnitType.packet)

    expected = cart.get_total()
    order = place_order(session, cart, customer)

    assert order.total_amount == expected


def test_order_items_do_not_follow_later_catalogue_changes(session, customer, book, filled_cart):
    order = place_order(session, filled_cart, customer)

    product = session.get(type(book), book.id)
    product.price_to_sell = 999
    product.name = "Renamed"
    session.add(product)
    session.commit()

    session.refresh(order)
    assert order.items[0].purchase_price == 450
    assert order.items[0].name == "Concepts of Physics"


def test_snapshots_are_detached_from_cart_lines(filled_cart):
    items = snapshot_items(filled_cart)
    filled_cart.lines[0].quantity = 99

    assert items[0].quantity == 1


def test_empty_cart_is_rejected_before_collaborator(session, customer):
    calls = []

    def collaborator(*args):
        calls.append(args)

    with pytest.raises(ConflictError):
        place_order(session, CartStore(), customer, create_order=collaborator)

    assert calls == []


def test_failed_collaborator_leaves_cart_untouched(session, customer, filled_cart):
    before = filled_cart.snapshot()

    def failing(*args):
        raise TransportError("order store unavailable")

    with pytest.raises(TransportError):
        place_order(session, filled_cart, customer, create_order=failing)

    assert filled_cart.snapshot() == before
    assert load_cart(session, customer.id).snapshot() == before


def test_database_failure_rolls_back_everything(session, customer, filled_cart, monkeypatch):
    before = filled_cart.snapshot()

    def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", broken_commit)
    with pytest.raises(TransportError):
        place_order(session, filled_cart, customer)
    monkeypatch.undo()

    assert filled_cart.snapshot() == before
    assert load_cart(session, customer.id).snapshot() == before
    assert list_orders(session, customer.id) == []
    assert session.exec(select(Notification)).all() == []


def test_second_checkout_while_first_in_flight_is_rejected(session, customer, filled_cart):
    seen = {}

    def nested(session, user, items, total_amount):
        try:
            place_order(session, filled_cart, user)
        except ConflictError as e:
            seen["detail"] = e.detail
        return create_order(session, user, items, total_amount)

    order = place_order(session, filled_cart, customer, create_order=nested)

    assert seen["detail"] == "Checkout already in progress"
    assert order.total_amount == 810
    assert len(list_orders(session, customer.id)) == 1


def test_get_order_by_id_and_code(session, customer, filled_cart):
    order = place_order(session, filled_cart, customer)

    assert get_order(session, str(order.id)).id == order.id
    assert get_order(session, order.order_code).id == order.id
    assert get_order(session, order.order_code.lower()).id == order.id

    with pytest.raises(NotFoundError):
        get_order(session, "99999")


def test_list_all_orders_filters(session, make_user, customer, filled_cart, pens):
    first = place_order(session, filled_cart, customer)
    first.payment_status = PaymentStatus.paid.value
    session.add(first)
    session.commit()

    other = session.get(User, make_user().id)
    cart = CartStore()
    cart.add_item(ProductView.from_product(pens), 1, UnitType.piece)
    place_order(session, cart, other)

    assert list_all_orders(session)["total_items"] == 2
    paid = list_all_orders(session, payment_status="Paid")
    assert [o.id for o in paid["results"]] == [first.id]
    assert list_all_orders(session, order_status="Delivered")["total_items"] == 0
    assert len(list_orders(session, other.id)) == 1


def test_unexpected_failure_rolls_back_order(session, customer, filled_cart, monkeypatch):
    before = filled_cart.snapshot()

    def broken_notification(**kwargs):
        raise RuntimeError("notification backend down")

    monkeypatch.setattr(order_service, "create_notification", broken_notification)
    with pytest.raises(RuntimeError):
        place_order(session, filled_cart, customer)

    assert filled_cart.snapshot() == before
    assert load_cart(session, customer.id).snapshot() == before
    assert list_orders(session, customer.id) == []


def test_deferred_line_delete_is_undone_by_rollback(session, customer, filled_cart):
    first = filled_cart.lines[0]

    delete_cart_line(session, customer.id, first.cart_item_id, commit=False)
    session.rollback()

    assert load_cart(session, customer.id).get(first.cart_item_id) is not None
