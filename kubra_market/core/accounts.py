# kubra_market/core/accounts.py
import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kubra_market.core import security
from kubra_market.core.exceptions import NotFoundError, ValidationError
from kubra_market.models.merchant import Merchant, Shop
from kubra_market.models.notification import Notification
from kubra_market.models.order import Order, OrderItem
from kubra_market.models.product import Product
from kubra_market.models.rental import MaintenanceRequest, Rental
from kubra_market.schemas import MerchantCreate, ShopCreate

logger = logging.getLogger(__name__)


def _username_taken(db: Session, username: str) -> bool:
    return db.query(Merchant.id).filter(Merchant.username == username).first() is not None


def _has_shop(db: Session, merchant_id: int) -> bool:
    return db.query(Shop.id).filter(Shop.merchant_id == merchant_id).first() is not None


def create_merchant(db: Session, merchant_in: MerchantCreate) -> Merchant:
    if _username_taken(db, merchant_in.username):
        raise ValidationError("Username already registered")

    merchant = Merchant(
        username=merchant_in.username,
        password_hash=security.get_password_hash(merchant_in.password),
        name=merchant_in.name,
        email=merchant_in.email,
        phone=merchant_in.phone,
    )
    db.add(merchant)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration
        db.rollback()
        raise ValidationError("Username already registered")
    db.refresh(merchant)
    logger.info("Merchant %s registered", merchant.username)
    return merchant


def create_shop(db: Session, merchant_id: int, shop_in: ShopCreate) -> Shop:
    """Open the merchant's shop; a merchant has at most one."""
    if _has_shop(db, merchant_id):
        raise ValidationError("Merchant already has a shop")

    shop = Shop(merchant_id=merchant_id, **shop_in.model_dump())
    db.add(shop)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Merchant already has a shop")
    db.refresh(shop)
    return shop


def authenticate(db: Session, username: str, password: str) -> Optional[Merchant]:
    """The merchant for a username/password pair, None if either is wrong."""
    merchant = db.query(Merchant).filter(Merchant.username == username).first()
    if not merchant:
        return None
    if not security.verify_password(password, merchant.password_hash):
        return None
    return merchant


def delete_merchant(db: Session, merchant_id: int) -> None:
    """
    Remove a merchant and everything it owns, children first, in one
    transaction. The FK cascades would do the same on PostgreSQL; the
    explicit statements keep it independent of the backend.
    """
    merchant = db.query(Merchant).filter(Merchant.id == merchant_id).with_for_update().first()
    if not merchant:
        raise NotFoundError("Merchant not found")

    try:
        merchant_orders = select(Order.id).where(Order.merchant_id == merchant_id)
        merchant_products = select(Product.id).where(Product.merchant_id == merchant_id)

        statements = [
            # 1. order lines (of the merchant's orders, or pointing at its products)
            delete(OrderItem).where(OrderItem.order_id.in_(merchant_orders)),
            delete(OrderItem).where(OrderItem.product_id.in_(merchant_products)),
            delete(Order).where(Order.merchant_id == merchant_id),
            # 2. shop-scoped rows
            delete(Notification).where(Notification.merchant_id == merchant_id),
            delete(MaintenanceRequest).where(MaintenanceRequest.merchant_id == merchant_id),
            delete(Rental).where(Rental.merchant_id == merchant_id),
            delete(Product).where(Product.merchant_id == merchant_id),
            delete(Shop).where(Shop.merchant_id == merchant_id),
            # 3. the merchant itself
            delete(Merchant).where(Merchant.id == merchant_id),
        ]
        for statement in statements:
            db.execute(statement, execution_options={"synchronize_session": False})
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Merchant %s and all owned data deleted", merchant_id)
