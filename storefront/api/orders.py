from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from storefront.api.deps import get_db, get_order_engine
from storefront.core.errors import OrderNotFound
from storefront.schemas import MAX_INT, OrderPlacedRead, OrderRead, OrderRequest
from storefront.services.ordering import OrderEngine
from storefront.store import order_ledger

router = APIRouter()

@router.post('/order', response_model=OrderPlacedRead)
def place_order(payload: OrderRequest, engine: OrderEngine = Depends(get_order_engine)):
    # OrderError subclasses are turned into responses by the app's exception handler
    placed = engine.place_order(payload.items)
    return OrderPlacedRead(order_id=placed.order_id, total=placed.total)

@router.get('/orders/{order_id}', response_model=OrderRead)
def get_order(order_id: int = Path(gt=0, le=MAX_INT), db: Session = Depends(get_db)):
    obj = order_ledger.get_order(db, order_id)
    if not obj: raise OrderNotFound(order_id)
    return obj
