from resale_ledger.routers.analytics import router as analytics_router
from resale_ledger.routers.auth import router as auth_router
from resale_ledger.routers.health import router as health_router
from resale_ledger.routers.products import router as products_router
from resale_ledger.routers.stores import router as stores_router

__all__ = [
    "analytics_router",
    "auth_router",
    "health_router",
    "products_router",
    "stores_router",
]
