"""Append-only order ledger. Orders are written once and never updated."""

from datetime import datetime
from typing import Mapping, Optional, Sequence
from sqlalchemy.orm import Session
from storefront.db.models import Order, OrderItem
from storefront.schemas import LineItem

def append_order(
    db: Session,
    lines: Sequence[LineItem],
    prices: Mapping[int, int],
    total_cents: int,
    created_at: datetime,
) -> Order:
    """Stage a new order with its line items in submission order.

    ``prices`` maps product id to the unit price in cents at reservation time.
    The order id is assigned on flush; the caller owns the transaction.
    """
    order = Order(total_cents=total_cents, created_at=created_at)
    for position, line in enumerate(lines):
        order.items.append(OrderItem(
            position=position,
            product_id=line.product_id,
            quantity=line.quantity,
            unit_price_cents=prices[line.product_id],
        ))
    db.add(order)
    db.flush()
    return order

def get_order(db: Session, order_id: int) -> Optional[Order]:
    return db.get(Order, order_id)
