# kubra_market/core/reports.py
"""Read-only views: low stock, sales figures and the dashboard composite."""
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from kubra_market.core.config import settings, utcnow, format_local_date, format_money
from kubra_market.core.orders import get_recent_orders
from kubra_market.core.rentals import get_current_rental
from kubra_market.models.order import Order
from kubra_market.models.product import Product

CENT = Decimal("0.01")
TREND_WINDOW = timedelta(days=30)


def get_low_stock_products(db: Session, merchant_id: int, threshold: Optional[int] = None) -> List[Product]:
    if threshold is None:
        threshold = settings.LOW_STOCK_THRESHOLD
    return (
        db.query(Product)
        .filter(Product.merchant_id == merchant_id, Product.stock < threshold)
        .order_by(Product.stock.asc(), Product.id.asc())
        .all()
    )


def get_sales_summary(db: Session, merchant_id: int) -> dict:
    # Every order counts, whatever its status (cancelled ones included)
    total, count = (
        db.query(func.coalesce(func.sum(Order.total_amount), 0), func.count(Order.id))
        .filter(Order.merchant_id == merchant_id)
        .one()
    )
    total = Decimal(total or 0).quantize(CENT)
    average = (total / count).quantize(CENT) if count else Decimal("0.00")
    return {
        "total_sale": total,
        "order_count": count,
        "avg_order_value": average,
    }


def get_sales_orders(db: Session, merchant_id: int, limit: int = 10) -> List[Order]:
    return get_recent_orders(db, merchant_id, limit=limit, with_items=True)


def _trend(current, previous) -> dict:
    if previous:
        value = round(abs(current - previous) * 100 / previous)
    else:
        value = 100 if current else 0

    if current > previous:
        trend = "up"
    elif current < previous:
        trend = "down"
    else:
        trend = "flat"
    return {"value": int(value), "trend": trend}


def _window_stats(db: Session, merchant_id: int, start: datetime, end: datetime):
    orders, revenue = (
        db.query(func.count(Order.id), func.coalesce(func.sum(Order.total_amount), 0))
        .filter(Order.merchant_id == merchant_id, Order.created_at >= start, Order.created_at < end)
        .one()
    )
    products = (
        db.query(func.count(Product.id))
        .filter(Product.merchant_id == merchant_id, Product.created_at >= start, Product.created_at < end)
        .scalar()
    )
    return orders, Decimal(revenue or 0), products


def get_dashboard_stats(db: Session, merchant_id: int, now: Optional[datetime] = None) -> dict:
    """Last 30 days against the 30 days before."""
    now = now or utcnow()
    current = _window_stats(db, merchant_id, now - TREND_WINDOW, now)
    previous = _window_stats(db, merchant_id, now - 2 * TREND_WINDOW, now - TREND_WINDOW)
    return {
        "orders_change": _trend(current[0], previous[0]),
        "revenue_change": _trend(current[1], previous[1]),
        "products_change": _trend(current[2], previous[2]),
    }


def get_dashboard(db: Session, merchant_id: int) -> dict:
    now = utcnow()
    recent_orders = get_recent_orders(db, merchant_id, limit=settings.DASHBOARD_RECENT_ORDERS)
    low_stock = get_low_stock_products(db, merchant_id, settings.LOW_STOCK_THRESHOLD)
    upcoming_rental = get_current_rental(db, merchant_id, now=now)

    alerts = []
    if low_stock:
        alerts.append({
            "title": "Low Stock Alert",
            "message": f"{len(low_stock)} products are running low on stock.",
        })
    if upcoming_rental:
        alerts.append({
            "title": "Rental Due",
            "message": (
                f"Your rental payment of {format_money(upcoming_rental.amount)} "
                f"is due on {format_local_date(upcoming_rental.due_date)}."
            ),
        })

    return {
        "recent_orders": recent_orders,
        "low_stock_products": low_stock,
        "upcoming_rental": upcoming_rental,
        "stats": get_dashboard_stats(db, merchant_id, now=now),
        "alerts": alerts,
    }
