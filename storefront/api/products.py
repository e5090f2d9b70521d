from fastapi import APIRouter, Depends, Path, Query
from typing import List
from sqlalchemy.orm import Session
from storefront.api.deps import get_db
from storefront.core.errors import ProductNotFound
from storefront.schemas import MAX_INT, ProductRead
from storefront.store import catalog_store

router = APIRouter()

@router.get('', response_model=List[ProductRead])
def list_products(db: Session = Depends(get_db), limit: int = Query(default=50, ge=1, le=200), offset: int = Query(default=0, ge=0)):
    return catalog_store.list_products(db, limit=limit, offset=offset)

@router.get('/{product_id}', response_model=ProductRead)
def get_product(product_id: int = Path(gt=0, le=MAX_INT), db: Session = Depends(get_db)):
    obj = catalog_store.get_product(db, product_id)
    if not obj: raise ProductNotFound(product_id)
    return obj
