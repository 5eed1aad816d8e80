from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, Text, Boolean, DateTime, Uuid

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class ProfileModel(Base):
    __tablename__ = "profiles"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, unique=True, index=True)
    email = Column(Text, nullable=True)
    full_name = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
