"""Order placement.

``OrderEngine.place_order`` validates the requested line items, reserves stock
and appends the order to the ledger inside a single transaction. Either every
product is decremented and the order row exists, or nothing changed.

Concurrent reservations on the same product are serialized by row locks
(``SELECT ... FOR UPDATE``; ``BEGIN IMMEDIATE`` on SQLite). The stock decrement
is additionally guarded, so an interleaving the lock did not prevent shows up
as a guard miss and the whole unit is retried from a fresh read.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from pydantic import ValidationError
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from storefront.core.errors import (
    InsufficientStock,
    InvalidRequest,
    OrderError,
    ProductNotFound,
    StorageFailure,
)
from storefront.core.logging import get_logger
from storefront.core.money import to_decimal
from storefront.schemas import LineItem
from storefront.store import catalog_store, order_ledger

log = get_logger(__name__)

# listener(outcome, elapsed_seconds); outcome is "success" or an error code
OrderListener = Callable[[str, float], None]


@dataclass(frozen=True)
class PlacedOrder:
    order_id: int
    total: Decimal
    created_at: datetime


class _StockConflict(Exception):
    """A guarded decrement matched no row; another writer got there first."""

    def __init__(self, product_id: int):
        super().__init__(product_id)
        self.product_id = product_id


def validate_line_items(items: Any) -> List[LineItem]:
    """Turn raw request items into ``LineItem`` objects or raise ``InvalidRequest``."""
    if items is None or isinstance(items, (str, bytes, Mapping)):
        raise InvalidRequest("items required")
    try:
        items = list(items)
    except TypeError:
        raise InvalidRequest("items must be a list") from None
    if not items:
        raise InvalidRequest("items required")

    lines = []
    for index, item in enumerate(items):
        if isinstance(item, LineItem):
            lines.append(item)
            continue
        try:
            lines.append(LineItem.model_validate(item))
        except ValidationError as exc:
            err = exc.errors()[0]
            field = ".".join(str(p) for p in err["loc"]) or "item"
            raise InvalidRequest(
                f"invalid line item at index {index}: {field}: {err['msg']}", index=index
            ) from None
    return lines


def aggregate_quantities(lines: Iterable[LineItem]) -> Dict[int, int]:
    """Sum quantities per product id, keeping first-seen order."""
    required: Dict[int, int] = {}
    for line in lines:
        required[line.product_id] = required.get(line.product_id, 0) + line.quantity
    return required


class OrderEngine:
    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        max_attempts: int = 3,
        listeners: Sequence[OrderListener] = (),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._session_factory = session_factory
        self._max_attempts = max_attempts
        self._listeners = list(listeners)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def add_listener(self, listener: OrderListener) -> None:
        self._listeners.append(listener)

    def place_order(self, items: Any) -> PlacedOrder:
        """Reserve stock for ``items`` and record the order.

        Raises ``InvalidRequest``, ``ProductNotFound``, ``InsufficientStock``
        or ``StorageFailure``; on any of them storage is left untouched.
        """
        started = time.perf_counter()
        outcome = "error"
        try:
            lines = validate_line_items(items)
            log.debug("order.started", line_items=len(lines))
            placed = self._place_with_retry(lines)
            outcome = "success"
            log.info("order.placed", order_id=placed.order_id, total=str(placed.total))
            return placed
        except OrderError as exc:
            outcome = exc.code
            if isinstance(exc, StorageFailure):
                log.error("order.failed", outcome=outcome, error=exc.message)
            else:
                log.info("order.rejected", outcome=outcome, **exc.details())
            raise
        finally:
            elapsed = time.perf_counter() - started
            for listener in self._listeners:
                try:
                    listener(outcome, elapsed)
                except Exception:
                    log.exception("order.listener_failed", outcome=outcome)

    def _place_with_retry(self, lines: List[LineItem]) -> PlacedOrder:
        for attempt in range(1, self._max_attempts + 1):
            try:
                with self._session_factory() as db, db.begin():
                    return self._reserve(db, lines)
            except _StockConflict as exc:
                log.warning("order.conflict", attempt=attempt, product_id=exc.product_id)
            except OperationalError as exc:
                log.warning("order.storage_busy", attempt=attempt, error=str(exc.orig))
            except SQLAlchemyError as exc:
                raise StorageFailure() from exc
        raise StorageFailure(f"could not reserve stock after {self._max_attempts} attempts")

    def _reserve(self, db, lines: List[LineItem]) -> PlacedOrder:
        required = aggregate_quantities(lines)
        products = catalog_store.lock_products(db, required)

        for product_id in required:
            if product_id not in products:
                raise ProductNotFound(product_id)

        for product_id, quantity in required.items():
            available = products[product_id].stock
            if quantity > available:
                raise InsufficientStock(product_id, quantity, available)

        prices = {pid: p.price_cents for pid, p in products.items()}
        total_cents = sum(prices[line.product_id] * line.quantity for line in lines)

        for product_id, quantity in required.items():
            if not catalog_store.decrement_stock(db, product_id, quantity):
                raise _StockConflict(product_id)

        order = order_ledger.append_order(db, lines, prices, total_cents, self._clock())
        return PlacedOrder(order_id=order.id, total=to_decimal(total_cents), created_at=order.created_at)
