# storefront/utils/validators.py
import uuid
from datetime import datetime, timezone

from storefront.domain.errors import NotFound


def parse_uuid(value, what: str = "record") -> uuid.UUID:
    """Identifiers travel as strings; a malformed one cannot match any row."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise NotFound(f"{what} {value} not found")


def require_positive(v: int, name: str = "value") -> None:
    if v <= 0:
        raise ValueError(f"{name} must be > 0")


def as_utc(dt: datetime | None) -> datetime | None:
    # sqlite hands back naive datetimes
    if dt is None or dt.tzinfo is not None:
        return dt
    return dt.replace(tzinfo=timezone.utc)
