from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy import func, update
from sqlalchemy.orm import Session

from kubra_market.api import deps
from kubra_market.core.config import utcnow
from kubra_market.core.tenancy import get_owned_or_raise
from kubra_market.db.session import get_db
from kubra_market.models.notification import Notification
from kubra_market.schemas import NotificationResponse, UnreadCount, MessageResponse

router = APIRouter()

@router.get("", response_model=List[NotificationResponse])
def read_notifications(
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    return db.query(Notification).filter(
        Notification.merchant_id == merchant_id
    ).order_by(Notification.created_at.desc(), Notification.id.desc()).all()

@router.get("/unread-count", response_model=UnreadCount)
def read_unread_count(
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    count = db.query(func.count(Notification.id)).filter(
        Notification.merchant_id == merchant_id,
        Notification.is_read == False  # noqa: E712
    ).scalar()
    return {"count": count or 0}

@router.post("/mark-all-read", response_model=MessageResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    db.execute(
        update(Notification)
        .where(Notification.merchant_id == merchant_id, Notification.is_read == False)  # noqa: E712
        .values(is_read=True, updated_at=utcnow()),
        execution_options={"synchronize_session": False},
    )
    db.commit()
    return {"message": "All notifications marked as read"}

# Marking an already-read notification again is fine
@router.patch("/{notification_id}", response_model=NotificationResponse)
def mark_read(
    notification_id: deps.RowIdPath,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    notification = get_owned_or_raise(db, Notification, notification_id, merchant_id, "Notification", for_update=True)
    notification.is_read = True
    notification.updated_at = utcnow()
    db.commit()
    db.refresh(notification)
    return notification
