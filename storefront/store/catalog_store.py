"""Product rows: catalog reads and the guarded stock decrement."""

from typing import Dict, Iterable, List, Optional
from sqlalchemy import select, update
from sqlalchemy.orm import Session
from storefront.db.models import Product

def get_product(db: Session, product_id: int) -> Optional[Product]:
    return db.get(Product, product_id)

def list_products(db: Session, limit: int = 50, offset: int = 0) -> List[Product]:
    stmt = select(Product).order_by(Product.id).offset(offset).limit(limit)
    return list(db.execute(stmt).scalars().all())

def lock_products(db: Session, product_ids: Iterable[int]) -> Dict[int, Product]:
    """Load and row-lock the given products, keyed by id.

    Rows are locked in ascending id order so two reservations over the same
    products cannot deadlock. Unknown ids are simply absent from the result.
    """
    ids = sorted(set(product_ids))
    if not ids:
        return {}
    stmt = (
        select(Product)
        .where(Product.id.in_(ids))
        .order_by(Product.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return {p.id: p for p in db.execute(stmt).scalars()}

def decrement_stock(db: Session, product_id: int, quantity: int) -> bool:
    """Take ``quantity`` units if at least that many remain.

    Returns False when the guard does not match, i.e. the product is gone or
    its stock dropped below ``quantity`` since it was read.
    """
    stmt = (
        update(Product)
        .where(Product.id == product_id, Product.stock >= quantity)
        .values(stock=Product.stock - quantity)
        .execution_options(synchronize_session=False)
    )
    return db.execute(stmt).rowcount == 1
