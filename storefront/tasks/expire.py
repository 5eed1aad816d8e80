# storefront/tasks/expire.py
from datetime import datetime, timezone

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.repos.order_repo import OrderRepo
from storefront.services.realtime import ChangeFeed
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def expire_payments(db, feed: ChangeFeed | None = None) -> int:
    """Mark pending payments whose QR window has passed as expired."""
    expired = OrderRepo(db).expire_pending_payments(datetime.now(timezone.utc))
    logger.info(f"Expired {len(expired)} pending payment(s)")

    if feed is not None:
        for order in expired:
            feed.publish("orders", "UPDATE", user_id=order.user_id, row_id=order.id)
    return len(expired)


@celery_app.task(name="storefront.tasks.expire.expire_payments_task")
def expire_payments_task():
    logger.info("Expire payments task started")

    db = SessionLocal()
    try:
        return expire_payments(db, ChangeFeed())
    finally:
        db.close()
