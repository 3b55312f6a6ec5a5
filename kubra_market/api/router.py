from fastapi import APIRouter
from kubra_market.api.endpoints import (
    auth, shop, products, orders, rental, maintenance, notifications, sales, dashboard
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(shop.router, prefix="/shop", tags=["shop"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(rental.router, prefix="/rental", tags=["rental"])
api_router.include_router(maintenance.router, prefix="/maintenance-requests", tags=["maintenance"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(sales.router, prefix="/sales", tags=["sales"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
