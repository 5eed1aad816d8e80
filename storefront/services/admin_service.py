# storefront/services/admin_service.py
from sqlalchemy.orm import Session

from storefront.data.models.banner import BannerModel
from storefront.data.models.order import ORDER_STATUSES, PAYMENT_STATUSES
from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFound, Unauthorized
from storefront.domain.schemas import (
    AdminOverview,
    AdminSettings,
    BannerIn,
    BannerOut,
    OrderOut,
    ProductIn,
    ProductOut,
    ProductPatch,
)
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo, BannerRepo
from storefront.services.catalog_service import product_to_out, banner_to_out
from storefront.services.notification_service import NotificationService
from storefront.services.order_status import order_to_out
from storefront.services.profile_service import ProfileService
from storefront.services.realtime import ChangeFeed
from storefront.utils.settings import PAYMENT_UPI, PAYMENT_QR_TTL_MINUTES
from storefront.utils.validators import parse_uuid
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AdminService:
    """Dashboard operations; every call requires ``profiles.is_admin``."""

    def __init__(self, db: Session, user_id, feed: ChangeFeed | None = None):
        self.db = db
        self.user_id = user_id
        self.orders = OrderRepo(db)
        self.products = ProductRepo(db)
        self.banners = BannerRepo(db)
        self.profiles = ProfileService(db)
        self.feed = feed
        self.notification_service = NotificationService()

    def _require_admin(self):
        if not self.profiles.is_admin(self.user_id):
            logger.warning(f"Admin operation refused for user {self.user_id}")
            raise Unauthorized("You don't have admin privileges.")

    def _publish(self, table: str, event: str, user_id=None, row_id=None):
        if self.feed is not None:
            self.feed.publish(table, event, user_id=user_id, row_id=row_id)

    def _get_order(self, order_id: str):
        order = self.orders.get_by_code(order_id)
        if not order:
            raise NotFound(f"Order {order_id} not found")
        return order

    # query
    def overview(self) -> AdminOverview:
        self._require_admin()
        return AdminOverview(
            total_products=self.products.count_products(),
            total_orders=self.orders.count_orders(),
            revenue=self.orders.revenue(),
            active_banners=self.banners.count_active(),
            recent_orders=[order_to_out(o) for o in self.orders.list_all(limit=5)],
        )

    def list_orders(self) -> list[OrderOut]:
        self._require_admin()
        return [order_to_out(o) for o in self.orders.list_all()]

    def settings(self) -> AdminSettings:
        self._require_admin()
        return AdminSettings(payment_upi=PAYMENT_UPI, payment_qr_ttl_minutes=PAYMENT_QR_TTL_MINUTES)

    # commands
    def update_order_status(self, order_id: str, status: str) -> OrderOut:
        self._require_admin()
        if status not in ORDER_STATUSES:
            raise ValueError(f"Unknown order status {status}")

        order = self.orders.update_fields(self._get_order(order_id), status=status)
        logger.info(f"Order {order_id} status set to {status} by admin {self.user_id}")

        self._publish("orders", "UPDATE", order.user_id, order.id)
        try:
            self.notification_service.send_status_changed(str(order.user_id), order.order_id, status)
        except Exception as e:
            logger.warning(f"Status notification for order {order_id} not queued: {e}")
        return order_to_out(order)

    def update_payment_status(self, order_id: str, payment_status: str) -> OrderOut:
        self._require_admin()
        if payment_status not in PAYMENT_STATUSES:
            raise ValueError(f"Unknown payment status {payment_status}")

        order = self.orders.update_fields(self._get_order(order_id), payment_status=payment_status)
        logger.info(f"Order {order_id} payment set to {payment_status} by admin {self.user_id}")
        self._publish("orders", "UPDATE", order.user_id, order.id)
        return order_to_out(order)

    def create_product(self, payload: ProductIn) -> ProductOut:
        self._require_admin()
        product = self.products.create_product(ProductModel(**payload.model_dump()))
        self._publish("products", "INSERT", row_id=product.id)
        return product_to_out(product)

    def update_product(self, product_id, payload: ProductPatch) -> ProductOut:
        """Existing orders keep their own price/title copies."""
        self._require_admin()
        product = self.products.get_product(parse_uuid(product_id, "Product"))
        if product is None:
            raise NotFound(f"Product {product_id} not found")

        product = self.products.update_product(product, payload.model_dump(exclude_unset=True))
        self._publish("products", "UPDATE", row_id=product.id)
        return product_to_out(product)

    def create_banner(self, payload: BannerIn) -> BannerOut:
        self._require_admin()
        banner = self.banners.create_banner(BannerModel(**payload.model_dump()))
        self._publish("banners", "INSERT", row_id=banner.id)
        return banner_to_out(banner)
