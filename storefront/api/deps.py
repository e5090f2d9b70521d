from storefront.db.session import SessionLocal, WriterSessionLocal
from storefront.core.config import settings
from storefront.core.metrics import observe_order
from storefront.services.ordering import OrderEngine

order_engine = OrderEngine(WriterSessionLocal, max_attempts=settings.ORDER_MAX_ATTEMPTS, listeners=[observe_order])

def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()

def get_order_engine() -> OrderEngine:
    return order_engine
