# kubra_market/core/notifications.py
from sqlalchemy.orm import Session
from kubra_market.models.notification import Notification, NotificationType


def add_notification(
    db: Session,
    merchant_id: int,
    type: NotificationType,
    title: str,
    message: str,
) -> Notification:
    """
    Queue a notification on the caller's session. It is committed (or rolled
    back) together with the mutation that caused it.
    """
    notification = Notification(
        merchant_id=merchant_id,
        type=type.value,
        title=title,
        message=message,
        is_read=False,
    )
    db.add(notification)
    return notification
