from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, Text, Boolean, DateTime, Uuid

from storefront.data.database import Base


class AddressModel(Base):
    __tablename__ = "addresses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    full_name = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    alt_phone = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    house_flat = Column(Text, nullable=False)
    road_area_colony = Column(Text, nullable=False)
    landmark = Column(Text, nullable=True)
    city = Column(Text, nullable=False)
    state = Column(Text, nullable=False)
    pincode = Column(Text, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
