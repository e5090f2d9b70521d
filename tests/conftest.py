import os

# Settings are read at import time; keep the test run away from ./data
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_SCHEMA", "false")

import pytest
from sqlalchemy import select

from storefront.core.logging import configure_logging
from storefront.db.models import Order, Product
from storefront.db.session import Base, create_db_engine, create_session_factory
from storefront.services.ordering import OrderEngine


@pytest.fixture(scope="session", autouse=True)
def _logging():
    configure_logging()


@pytest.fixture()
def db_engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'shop.db'}", busy_timeout=10.0)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    return create_session_factory(db_engine, writer=True)


@pytest.fixture()
def reader_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture()
def catalog(session_factory):
    """Products used across the order tests.

    1: 10.00 x5, 2: 2.50 x1, 3: 19.99 x1, 4: 3.33 x4, 5: 4.99 x500
    """
    with session_factory() as db, db.begin():
        db.add_all([
            Product(id=1, name="Widget", price_cents=1000, stock=5),
            Product(id=2, name="Gadget", price_cents=250, stock=1),
            Product(id=3, name="Gizmo", price_cents=1999, stock=1),
            Product(id=4, name="Sprocket", price_cents=333, stock=4),
            Product(id=5, name="Sticker Pack", price_cents=499, stock=500),
        ])


@pytest.fixture()
def order_engine(session_factory, catalog):
    return OrderEngine(session_factory)


@pytest.fixture()
def read_state(session_factory):
    """Return a callable giving ``(stock by product id, orders with their lines)``."""

    def _read():
        with session_factory() as db:
            stock = {p.id: p.stock for p in db.execute(select(Product)).scalars()}
            orders = [
                (o.id, o.total_cents, [(i.product_id, i.quantity, i.unit_price_cents) for i in o.items])
                for o in db.execute(select(Order).order_by(Order.id)).scalars()
            ]
        return stock, orders

    return _read
