"""Schema creation and default catalog seeding for local runs."""

from pathlib import Path
from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from storefront.core.logging import get_logger
from storefront.core.money import to_cents
from storefront.db.models import Product
from storefront.db.session import Base

log = get_logger(__name__)

DEFAULT_CATALOG = [
    ("T-Shirt", "19.99", 50),
    ("Mug", "9.99", 100),
    ("Sticker Pack", "4.99", 500),
]

def ensure_sqlite_dir(engine: Engine) -> None:
    url = engine.url
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

def seed_catalog(db: Session, catalog=DEFAULT_CATALOG) -> int:
    """Insert ``catalog`` when the products table is empty. Returns rows added."""
    if db.execute(select(func.count(Product.id))).scalar_one():
        return 0
    for name, price, stock in catalog:
        db.add(Product(name=name, price_cents=to_cents(price), stock=stock))
    return len(catalog)

def init_db(engine: Engine) -> None:
    ensure_sqlite_dir(engine)
    Base.metadata.create_all(engine)
    with Session(engine) as db, db.begin():
        added = seed_catalog(db)
    log.info("db.ready", url=engine.url.render_as_string(hide_password=True), seeded=added)
