# kubra_market/core/rentals.py
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from kubra_market.core.config import utcnow, format_money
from kubra_market.core.exceptions import ValidationError
from kubra_market.core.notifications import add_notification
from kubra_market.core.tenancy import get_owned_or_raise
from kubra_market.models.notification import NotificationType
from kubra_market.models.rental import Rental

logger = logging.getLogger(__name__)


def get_current_rental(db: Session, merchant_id: int, now: Optional[datetime] = None) -> Optional[Rental]:
    """Nearest unpaid rental that is not yet due."""
    now = now or utcnow()
    return (
        db.query(Rental)
        .filter(
            Rental.merchant_id == merchant_id,
            Rental.due_date > now,
            Rental.is_paid == False,  # noqa: E712
        )
        .order_by(Rental.due_date.asc(), Rental.id.asc())
        .first()
    )


def list_rentals(db: Session, merchant_id: int) -> List[Rental]:
    return (
        db.query(Rental)
        .filter(Rental.merchant_id == merchant_id)
        .order_by(Rental.due_date.asc(), Rental.id.asc())
        .all()
    )


def pay_rental(db: Session, merchant_id: int, rental_id: int) -> Rental:
    """
    Mark a rental paid. The row is locked before the already-paid check, so
    two concurrent payments cannot both go through. Paying twice is an error
    and writes nothing.
    """
    try:
        rental = get_owned_or_raise(db, Rental, rental_id, merchant_id, "Rental", for_update=True)
        if rental.is_paid:
            raise ValidationError("Rental is already paid")

        rental.is_paid = True
        rental.updated_at = utcnow()

        add_notification(
            db,
            merchant_id=merchant_id,
            type=NotificationType.RENTAL,
            title="Rental Payment Successful",
            message=f"Your rental payment of {format_money(rental.amount)} has been processed successfully.",
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(rental)
    logger.info("Rental %s paid by merchant %s", rental_id, merchant_id)
    return rental
