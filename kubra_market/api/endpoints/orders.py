import math
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from kubra_market.api import deps
from kubra_market.core import orders as order_service
from kubra_market.core.exceptions import ValidationError
from kubra_market.core.tenancy import get_owned_or_raise
from kubra_market.db.session import get_db
from kubra_market.models.order import Order
from kubra_market.schemas import MAX_INT, OrderCreate, OrderResponse, OrderStatusUpdate, OrderPage

router = APIRouter()

MAX_PAGE_SIZE = 100

@router.get("", response_model=OrderPage)
def read_orders(
    page: int = Query(1, le=MAX_INT),
    page_size: int = Query(10, alias="pageSize", le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    if page < 1 or page_size < 1:
        raise ValidationError("Invalid pagination parameters")

    orders, total = order_service.list_orders(db, merchant_id, page, page_size)
    return {
        "orders": orders,
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": math.ceil(total / page_size),
    }

@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    order_in: OrderCreate,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    return order_service.place_order(db, merchant_id, order_in)

@router.get("/{order_id}", response_model=OrderResponse)
def read_order(
    order_id: deps.RowIdPath,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    get_owned_or_raise(db, Order, order_id, merchant_id, "Order")
    return order_service.get_order_with_items(db, order_id)

@router.patch("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: deps.RowIdPath,
    order_in: OrderStatusUpdate,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    return order_service.update_order_status(db, merchant_id, order_id, order_in.status)
