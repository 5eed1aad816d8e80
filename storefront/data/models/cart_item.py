from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    qty = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    product = relationship("ProductModel")

    # one line per product in a user cart
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="u_cart_user_product"),)
