"""API route modules."""

from rms_procurement.api.routes.health import router as health_router
from rms_procurement.api.routes.inventory import router as inventory_router
from rms_procurement.api.routes.purchase_orders import router as purchase_orders_router
from rms_procurement.api.routes.reports import router as reports_router

__all__ = [
    "health_router",
    "purchase_orders_router",
    "inventory_router",
    "reports_router",
]
