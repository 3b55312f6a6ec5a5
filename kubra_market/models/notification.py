import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from kubra_market.core.config import utcnow
from kubra_market.db.base_class import Base

class NotificationType(str, enum.Enum):
    ORDER = "order"
    SHIPPING = "shipping"
    RENTAL = "rental"
    DELIVERY = "delivery"
    SYSTEM = "system"

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    merchant_id = Column(Integer, ForeignKey("merchants.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
