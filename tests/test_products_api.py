import pytest

from storefront.models.product import Category


def test_admin_creates_products_and_public_reads_them(client, headers_for, make_user):
    admin = headers_for(make_user(role="admin"))

    response = client.post("/admin/products", json={
        "name": "Class 10 Science",
        "category": "Book",
        "sub_category": "Academic",
        "academic_category": "School",
        "class_name": "10",
        "price": 600,
        "market_price": 600,
        "price_to_sell": 520,
        "images": ["uploads/products/science.jpg"],
    }, headers=admin)
    assert response.status_code == 201
    product_id = response.json()["id"]

    detail = client.get(f"/products/{product_id}").json()
    assert detail["effective_price"] == 520
    assert detail["requires_unit_choice"] is False

    listing = client.get("/products", params={"category": "Book", "class_name": "10"}).json()
    assert [p["id"] for p in listing["results"]] == [product_id]


def test_book_cannot_carry_unit_prices(client, headers_for, make_user):
    admin = headers_for(make_user(role="admin"))

    response = client.post("/admin/products", json={
        "name": "Novel",
        "category": "Book",
        "price": 300,
        "price_per_piece": 10,
    }, headers=admin)
    assert response.status_code == 422


def test_unit_choice_flag(client, make_product):
    both = make_product(Category.stationery, price=20, price_per_piece=15, price_per_packet=120)
    single = make_product(Category.gift, price=250, price_per_piece=240)

    assert client.get(f"/products/{both.id}").json()["requires_unit_choice"] is True
    assert client.get(f"/products/{single.id}").json()["requires_unit_choice"] is False
    assert client.get(f"/products/{single.id}").json()["effective_price"] == 240


def test_update_and_delete_product(client, headers_for, make_user, make_product):
    admin = headers_for(make_user(role="admin"))
    pens = make_product(Category.stationery, price=20, price_per_piece=15)

    updated = client.put(f"/admin/products/{pens.id}", json={"price_per_packet": 130}, headers=admin)
    assert updated.json()["price_per_packet"] == 130

    rejected = client.put(f"/admin/products/{pens.id}", json={"price_to_sell": 10}, headers=admin)
    assert rejected.status_code == 400

    assert client.delete(f"/admin/products/{pens.id}", headers=admin).status_code == 200
    assert client.get(f"/products/{pens.id}").status_code == 404


def test_customers_cannot_manage_products(client, headers_for, make_user):
    response = client.post("/admin/products", json={"name": "X", "category": "Gift", "price": 5},
                           headers=headers_for(make_user()))
    assert response.status_code == 403


@pytest.mark.parametrize("field", ["price", "name", "description"])
def test_update_rejects_clearing_required_fields(client, headers_for, make_user, make_product, field):
    admin = headers_for(make_user(role="admin"))
    pens = make_product(Category.stationery, price=20, price_per_piece=15)

    response = client.put(f"/admin/products/{pens.id}", json={field: None}, headers=admin)

    assert response.status_code == 400
    assert client.get(f"/products/{pens.id}").json()["price"] == 20


def test_update_book_market_price(client, headers_for, make_user, make_product):
    admin = headers_for(make_user(role="admin"))
    book = make_product(Category.book, price=700, price_to_sell=450, market_price=600)
    pens = make_product(Category.stationery, price=20, price_per_piece=15)

    updated = client.put(f"/admin/products/{book.id}", json={"market_price": 650}, headers=admin)
    assert updated.status_code == 200
    assert updated.json()["market_price"] == 650

    rejected = client.put(f"/admin/products/{pens.id}", json={"market_price": 30}, headers=admin)
    assert rejected.status_code == 400
