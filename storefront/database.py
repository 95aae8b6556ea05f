from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session
from storefront.config import settings


def build_engine(url: str):
    if url.startswith("sqlite"):
        # a single shared connection keeps in-memory databases alive across threads
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        pool_recycle=1800,
    )


engine = build_engine(settings.database_url)


def create_db_and_tables(bind=None):
    from storefront.models import user, product, cart, order, order_event, notifications  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)


def get_session():
    with Session(engine) as session:
        yield session
