# storefront/services/order_status.py
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import OrderOut, OrderLineOut
from storefront.repos.order_repo import OrderRepo
from storefront.services.realtime import ChangeFeed, Subscription
from storefront.utils.validators import parse_uuid, as_utc
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# display only; status changes come from an admin, nothing here enforces order
STATUS_LABELS = {
    "placed": "Order Placed",
    "confirmed": "Confirmed",
    "packaging": "Packaging",
    "out_for_delivery": "Out for Delivery",
    "delivered": "Delivered",
    "cancelled": "Cancelled",
}

STATUS_PROGRESS = {
    "placed": 25,
    "confirmed": 25,
    "packaging": 50,
    "out_for_delivery": 75,
    "delivered": 100,
    "cancelled": 0,
}


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, "Unknown")


def status_progress(status: str) -> int:
    return STATUS_PROGRESS.get(status, 0)


def payment_label(payment_status: str) -> str:
    return "Paid" if payment_status == "verified" else "Pending"


def order_to_out(order: OrderModel) -> OrderOut:
    return OrderOut(
        id=str(order.id),
        order_id=order.order_id,
        user_id=str(order.user_id),
        address_id=str(order.address_id),
        amount_total=order.amount_total,
        currency=order.currency,
        status=order.status,
        status_label=status_label(order.status),
        progress=status_progress(order.status),
        payment_status=order.payment_status,
        payment_label=payment_label(order.payment_status),
        payment_upi=order.payment_upi,
        payment_qr_expires_at=as_utc(order.payment_qr_expires_at),
        payment_utr=order.payment_utr,
        created_at=as_utc(order.created_at),
        items=[
            OrderLineOut(
                product_id=str(item.product_id),
                title=item.title,
                unit_price=item.unit_price,
                qty=item.qty,
                subtotal=item.subtotal,
            )
            for item in order.items
        ],
    )


class OrderStatusView:
    """Read-only order history of one user, newest first."""

    def __init__(self, db: Session, user_id):
        self.db = db
        self.repo = OrderRepo(db)
        self.user_id = str(user_id)
        self.orders: list[OrderOut] = []
        self.subscription: Subscription | None = None

    def load(self) -> list[OrderOut]:
        try:
            uid = parse_uuid(self.user_id, "user")
            # fresh rows, not whatever the session cached
            self.db.expire_all()
            self.orders = [order_to_out(o) for o in self.repo.list_for_user(uid)]
        except (StorefrontError, SQLAlchemyError) as e:
            self.db.rollback()
            logger.error(f"Error loading orders of user {self.user_id}: {e}")
            self.orders = []
        return self.orders

    def subscribe(self, feed: ChangeFeed) -> Subscription:
        if self.subscription is None:
            self.subscription = feed.subscribe("orders", self.user_id)
        return self.subscription

    def poll(self, timeout: float = 0.0) -> bool:
        if self.subscription is None:
            return False
        events = self.subscription.poll(timeout)
        if events:
            self.load()
        return bool(events)

    def follow(self) -> Iterator[list[OrderOut]]:
        if self.subscription is None:
            return
        for _event in self.subscription:
            yield self.load()

    def unsubscribe(self):
        if self.subscription is not None:
            self.subscription.close()
            self.subscription = None
