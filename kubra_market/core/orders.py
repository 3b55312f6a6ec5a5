# kubra_market/core/orders.py
import logging
from decimal import Decimal
from typing import Dict, List, Tuple

from sqlalchemy import func, update
from sqlalchemy.orm import Session, selectinload

from kubra_market.core.config import utcnow
from kubra_market.core.exceptions import ValidationError
from kubra_market.core.notifications import add_notification
from kubra_market.core.tenancy import get_owned_or_raise
from kubra_market.models.notification import NotificationType
from kubra_market.models.order import Customer, Order, OrderItem, OrderStatus
from kubra_market.models.product import Product
from kubra_market.schemas import OrderCreate

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
# Largest value a Numeric(12, 2) column holds
MAX_TOTAL = Decimal("9999999999.99")


def _with_items(query):
    return query.options(selectinload(Order.items).selectinload(OrderItem.product))


def _resolve_customer(db: Session, order_in: OrderCreate) -> Customer:
    if order_in.customer_id is not None:
        customer = db.get(Customer, order_in.customer_id)
        if customer is None:
            raise ValidationError(f"Customer {order_in.customer_id} does not exist")
        return customer

    customer = Customer(
        name=order_in.customer_name,
        phone=order_in.customer_phone,
        address=order_in.customer_address,
        email=order_in.customer_email,
    )
    db.add(customer)
    return customer


def _create_order_rows(db: Session, merchant_id: int, order_in: OrderCreate) -> Order:
    # Same product on several lines is checked against its summed quantity
    requested: Dict[int, int] = {}
    for line in order_in.items:
        requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity

    # 1. Lock the product rows (ascending id, so concurrent orders lock in the same order)
    products = (
        db.query(Product)
        .filter(Product.id.in_(sorted(requested)))
        .order_by(Product.id)
        .with_for_update()
        .all()
    )
    by_id = {p.id: p for p in products}

    # 2. Preconditions, evaluated under the lock
    for product_id, quantity in requested.items():
        product = by_id.get(product_id)
        if product is None:
            raise ValidationError(f"Product {product_id} does not exist")
        if product.merchant_id != merchant_id:
            raise ValidationError(f"Product {product_id} does not belong to this merchant")
        if product.stock < quantity:
            raise ValidationError(
                f"Insufficient stock for {product.name}: {product.stock} available, {quantity} requested"
            )

    # 3. Order header + lines with the unit price as of now
    order = Order(
        merchant_id=merchant_id,
        customer=_resolve_customer(db, order_in),
        customer_name=order_in.customer_name,
        customer_phone=order_in.customer_phone,
        customer_address=order_in.customer_address,
        status=OrderStatus.NEW.value,
        payment_method=order_in.payment_method,
        is_paid=order_in.is_paid,
    )
    total = Decimal("0")
    for line in order_in.items:
        unit_price = Decimal(by_id[line.product_id].price)
        order.items.append(OrderItem(product_id=line.product_id, quantity=line.quantity, price=unit_price))
        total += unit_price * line.quantity
    if total > MAX_TOTAL:
        raise ValidationError("Order total is too large")
    order.total_amount = total.quantize(CENT)
    db.add(order)

    # 4. Decrement stock; the WHERE guard keeps it from ever going negative
    now = utcnow()
    for product_id, quantity in requested.items():
        result = db.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity, updated_at=now)
        )
        if result.rowcount != 1:
            raise ValidationError(f"Insufficient stock for product {product_id}")

    db.flush()
    return order


def place_order(db: Session, merchant_id: int, order_in: OrderCreate) -> Order:
    """
    Create an order, its lines and the stock decrements as one transaction.

    Any failed precondition raises ValidationError after a full rollback, so
    either every row is written or none is.
    """
    try:
        order = _create_order_rows(db, merchant_id, order_in)
        db.commit()
    except ValidationError as e:
        db.rollback()
        logger.info("Order rejected for merchant %s: %s", merchant_id, e.detail)
        raise
    except Exception:
        db.rollback()
        raise

    logger.info("Order %s placed for merchant %s, total %s", order.id, merchant_id, order.total_amount)
    return get_order_with_items(db, order.id)


def update_order_status(db: Session, merchant_id: int, order_id: int, status: OrderStatus) -> Order:
    """
    Set any of the five statuses, no transition rules. Re-setting the same
    status is accepted. One notification is written with the change.
    """
    try:
        order = get_owned_or_raise(db, Order, order_id, merchant_id, "Order", for_update=True)
        order.status = status.value
        order.updated_at = utcnow()

        add_notification(
            db,
            merchant_id=merchant_id,
            type=NotificationType.ORDER,
            title=f"Order #{order_id} Status Updated",
            message=f"Order status has been updated to {status.value}",
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Order %s status set to %s", order_id, status.value)
    return get_order_with_items(db, order_id)


def get_order_with_items(db: Session, order_id: int) -> Order:
    return _with_items(db.query(Order)).filter(Order.id == order_id).first()


def list_orders(db: Session, merchant_id: int, page: int = 1, page_size: int = 10) -> Tuple[List[Order], int]:
    """One page of a merchant's orders, newest first, plus the overall count."""
    offset = (page - 1) * page_size

    orders = (
        _with_items(db.query(Order))
        .filter(Order.merchant_id == merchant_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .offset(offset)
        .limit(page_size)
        .all()
    )
    total = db.query(func.count(Order.id)).filter(Order.merchant_id == merchant_id).scalar() or 0
    return orders, total


def get_recent_orders(db: Session, merchant_id: int, limit: int = 5, with_items: bool = False) -> List[Order]:
    query = db.query(Order)
    if with_items:
        query = _with_items(query)
    return (
        query.filter(Order.merchant_id == merchant_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(limit)
        .all()
    )
