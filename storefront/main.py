import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from storefront.database import create_db_and_tables
from storefront.config import settings
from storefront.errors import StoreError
from storefront.routes import (
    admin_notifications,
    admin_orders,
    auth,
    cart,
    orders,
    products,
    products_admin,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.ENV == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="MP Books & Stationery API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(products.router, prefix="/products", tags=["Products"])
app.include_router(products_admin.router, prefix="/admin/products", tags=["Admin Products"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(admin_orders.router, prefix="/admin/orders", tags=["Admin Orders"])
app.include_router(admin_notifications.router, prefix="/admin/notifications", tags=["Admin Notifications"])


@app.get("/")
def root():
    return {
        "auth_endpoints": ["/auth/register", "/auth/login", "/auth/me"],
        "products": ["/products", "/products/{product_id}"],
        "admin_products": ["/admin/products", "/admin/products/{product_id}"],
        "cart": [
            "/cart", "/cart/add", "/cart/update/{cart_item_id}",
            "/cart/remove/{cart_item_id}", "/cart/clear"
        ],
        "orders": ["/orders/new", "/orders/me", "/orders/{order_ref}", "/orders/{order_id}/cancel"],
        "admin_orders": ["/admin/orders", "/admin/orders/{order_id}", "/admin/orders/{order_id}/timeline"],
        "admin_notifications": ["/admin/notifications", "/admin/notifications/{id}/read"],
    }
