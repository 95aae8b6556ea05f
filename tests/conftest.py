import os

os.environ["SQLALCHEMY_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ENV"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from storefront.database import build_engine, create_db_and_tables, get_session
from storefront.main import app
from storefront.models.product import Category, Product
from storefront.models.user import User
from storefront.utils.hash import hash_password
from storefront.utils.token import create_access_token


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(engine):
    counter = {"n": 0}

    def _make_user(role="user", phone="9855038599", **fields):
        counter["n"] += 1
        with Session(engine) as session:
            user = User(
                name=fields.pop("name", f"Customer {counter['n']}"),
                email=fields.pop("email", f"customer{counter['n']}@example.com"),
                phone=phone,
                password=hash_password(fields.pop("password", "secret123")),
                role=role,
                **fields,
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    return _make_user


@pytest.fixture
def make_product(engine):
    def _make_product(category=Category.stationery, price=10.0, **fields):
        with Session(engine) as session:
            product = Product(
                name=fields.pop("name", f"{category.value} item"),
                category=category,
                price=price,
                images=fields.pop("images", ["uploads/products/thumb.jpg", "uploads/products/side.jpg"]),
                **fields,
            )
            session.add(product)
            session.commit()
            session.refresh(product)
            return product

    return _make_product


def auth_headers(user: User) -> dict:
    token = create_access_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    return auth_headers
