# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """Buyer notifications, processed asynchronously by Celery."""

    @staticmethod
    def send_order_placed(user_id: str, order_id: str, amount_total: str):
        send_order_placed_task.delay(user_id, order_id, amount_total)

    @staticmethod
    def send_status_changed(user_id: str, order_id: str, status: str):
        send_status_changed_task.delay(user_id, order_id, status)


@celery_app.task(name="storefront.services.notification_service.send_order_placed_task")
def send_order_placed_task(user_id: str, order_id: str, amount_total: str):
    # no delivery channel yet (email/SMS); the log line is the notification
    logger.info(f"[NOTIFICATION] User {user_id}: order #{order_id} placed, amount {amount_total}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}


@celery_app.task(name="storefront.services.notification_service.send_status_changed_task")
def send_status_changed_task(user_id: str, order_id: str, status: str):
    logger.info(f"[NOTIFICATION] User {user_id}: order #{order_id} is now {status}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
