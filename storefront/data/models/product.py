from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String, Text, Numeric, Boolean, Integer, DateTime, JSON, Uuid

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    images = Column(JSON, nullable=False, default=list)
    in_stock = Column(Boolean, nullable=False, default=True)
    stock_qty = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
