from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, Text, Boolean, Integer, DateTime, Uuid

from storefront.data.database import Base


class BannerModel(Base):
    __tablename__ = "banners"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    image_url = Column(Text, nullable=False)
    link_url = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
