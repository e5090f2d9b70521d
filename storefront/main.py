import uuid
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from storefront.version import VERSION
from storefront.api import orders, products
from storefront.core.config import settings
from storefront.core.errors import OrderError
from storefront.core.logging import add_context, clear_context, configure_logging, get_logger
from storefront.db.bootstrap import init_db
from storefront.db.session import engine

log = get_logger(__name__)

STATUS_BY_CODE = {
    'invalid_request': 400,
    'product_not_found': 404,
    'order_not_found': 404,
    'insufficient_stock': 409,
    'storage_failure': 500,
}

# Create instrumentator first
instrumentator = Instrumentator()

app = FastAPI(title='Storefront Service', version=VERSION)

# Instrument the app BEFORE adding routes or middleware
instrumentator.instrument(app).expose(app, include_in_schema=False, endpoint='/metrics', should_gzip=True)

@app.middleware('http')
async def request_context(request: Request, call_next):
    clear_context()
    add_context(request_id=request.headers.get('X-Request-ID') or uuid.uuid4().hex, path=request.url.path)
    try:
        return await call_next(request)
    finally:
        clear_context()

@app.exception_handler(OrderError)
async def order_error_handler(request: Request, exc: OrderError):
    return JSONResponse(status_code=STATUS_BY_CODE.get(exc.code, 500), content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [{'loc': [str(p) for p in e['loc']], 'msg': e['msg']} for e in exc.errors()]
    return JSONResponse(status_code=400, content={'error': 'invalid request body', 'code': 'invalid_request', 'details': errors})

@app.get('/health')
def health(): return {'status': 'ok'}

@app.get('/v1/_info')
def info(): return {'service': 'storefront', 'version': VERSION}

@app.on_event('startup')
async def startup_event():
    configure_logging()
    if settings.AUTO_CREATE_SCHEMA:
        init_db(engine)
    for route in app.routes:
        if hasattr(route, 'methods') and hasattr(route, 'path'):
            log.debug('route', methods=sorted(route.methods), path=route.path)

app.include_router(products.router, prefix='/api/products', tags=['products'])
app.include_router(orders.router, prefix='/api', tags=['orders'])
