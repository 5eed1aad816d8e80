# storefront/services/order_service.py
from datetime import datetime, timezone, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import Conflict, NotFound, OrderPlacementError, Unauthorized
from storefront.domain.schemas import OrderOut
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.profile_repo import ProfileRepo
from storefront.services.cart_service import CartService
from storefront.services.notification_service import NotificationService
from storefront.services.order_status import order_to_out
from storefront.services.realtime import ChangeFeed
from storefront.utils.settings import DEFAULT_CURRENCY, PAYMENT_UPI, PAYMENT_QR_TTL_MINUTES
from storefront.utils.formatters import format_price
from storefront.utils.validators import parse_uuid, as_utc
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# payment reference can only be (re)submitted from these states
_PAYABLE = ("pending", "failed")


class OrderService:
    """
    Checkout and the buyer's side of an order.

    Separate from CartService: an order owns a frozen copy of the cart lines
    and keeps no link back to the cart that produced it.
    """

    def __init__(self, db: Session, feed: ChangeFeed | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.profiles = ProfileRepo(db)
        self.feed = feed
        self.notification_service = NotificationService()

    def _publish(self, table: str, event: str, user_id, row_id=None):
        if self.feed is not None:
            self.feed.publish(table, event, user_id=user_id, row_id=row_id)

    def place_order(self, cart: CartService, address_id) -> OrderOut:
        """
        Use case: turn the current cart into an order.

        1. checks sign-in, a non-empty cart and the buyer's address
        2. generates a unique 12-digit order id
        3. writes the order, its lines and deletes the ordered cart rows in ONE transaction
        4. announces the change and notifies the buyer (async)

        On any database failure nothing is committed and the cart stays as it was.
        """
        if not cart.is_authenticated:
            raise Unauthorized("Sign in to place an order")

        uid = parse_uuid(cart.user_id, "user")
        lines = list(cart.items)
        if not lines:
            raise ValueError("Cart is empty")

        address = self.profiles.get_address(parse_uuid(address_id, "Address"))
        if address is None or address.user_id != uid:
            raise NotFound(f"Address {address_id} not found")

        amount_total = cart.total_amount
        now = datetime.now(timezone.utc)

        try:
            order = OrderModel(
                order_id=self.repo.generate_order_id(),
                user_id=uid,
                address_id=address.id,
                amount_total=amount_total,
                currency=DEFAULT_CURRENCY,
                status="placed",
                payment_status="pending",
                payment_upi=PAYMENT_UPI,
                payment_qr_expires_at=now + timedelta(minutes=PAYMENT_QR_TTL_MINUTES),
            )
            items = [
                OrderItemModel(
                    product_id=parse_uuid(line.product_id, "Product"),
                    title=line.title,
                    unit_price=line.price,
                    qty=line.qty,
                    subtotal=line.price * line.qty,
                )
                for line in lines
            ]

            self.repo.add_order(order, items)
            # only the ordered lines; rows added meanwhile by another session stay
            self.cart_repo.delete_items(uid, [item.product_id for item in items])
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Order placement for user {uid} failed, nothing committed: {e}")
            raise OrderPlacementError("Order could not be placed. Your cart is unchanged, please try again.")

        logger.info(f"Order {order.order_id} placed by user {uid}: {len(items)} line(s), total {amount_total}")

        self._publish("orders", "INSERT", uid, order.id)
        self._publish("cart_items", "DELETE", uid)
        cart.reload()

        try:
            self.notification_service.send_order_placed(
                str(uid), order.order_id, format_price(amount_total, order.currency)
            )
        except Exception as e:
            # the order is committed; a broker outage must not report it as failed
            logger.warning(f"Order {order.order_id} notification not queued: {e}")

        return order_to_out(order)

    def get_order(self, order_id: str, user_id) -> OrderOut:
        """Use case: one order of the buyer, by its 12-digit id."""
        order = self.repo.get_by_code(order_id)
        if not order:
            raise NotFound(f"Order {order_id} not found")

        if order.user_id != parse_uuid(user_id, "user"):
            raise Unauthorized("No access to this order")

        return order_to_out(order)

    def submit_payment_reference(self, order_id: str, user_id, utr: str) -> OrderOut:
        """
        Use case: the buyer paid by UPI off-band and enters the transaction
        reference (UTR). The payment then waits for an admin to verify it.
        """
        order = self.repo.get_by_code(order_id)
        if not order:
            raise NotFound(f"Order {order_id} not found")

        if order.user_id != parse_uuid(user_id, "user"):
            raise Unauthorized("No access to this order")

        if order.payment_status not in _PAYABLE:
            raise Conflict(f"Payment of order {order_id} is already {order.payment_status}")

        expires = as_utc(order.payment_qr_expires_at)
        if expires is not None and expires < datetime.now(timezone.utc):
            self.repo.update_fields(order, payment_status="expired")
            self._publish("orders", "UPDATE", order.user_id, order.id)
            raise Conflict(f"Payment window of order {order_id} has expired")

        order = self.repo.update_fields(order, payment_utr=utr.strip(), payment_status="paid")
        logger.info(f"Payment reference submitted for order {order_id}")
        self._publish("orders", "UPDATE", order.user_id, order.id)
        return order_to_out(order)
