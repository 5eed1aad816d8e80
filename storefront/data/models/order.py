from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, ForeignKey, String, Text, DateTime, Numeric, Uuid
from sqlalchemy.orm import relationship

from storefront.data.database import Base

ORDER_STATUSES = ("placed", "confirmed", "packaging", "out_for_delivery", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "paid", "failed", "verified", "expired")


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(String(12), nullable=False, unique=True)  # 12-digit, shown to the buyer
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    address_id = Column(Uuid(as_uuid=True), ForeignKey("addresses.id"), nullable=False)

    amount_total = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="INR")

    status = Column(String(20), nullable=False, default="placed")
    payment_status = Column(String(20), nullable=False, default="pending")
    payment_upi = Column(Text, nullable=True)
    payment_qr_expires_at = Column(DateTime(timezone=True), nullable=True)
    payment_utr = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.created_at",
    )
