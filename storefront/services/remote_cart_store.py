# storefront/services/remote_cart_store.py
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import Conflict
from storefront.domain.schemas import CartLine
from storefront.repos.cart_repo import CartRepo
from storefront.services.realtime import ChangeFeed
from storefront.utils.validators import parse_uuid, require_positive
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

TABLE = "cart_items"


class RemoteCartStore:
    """
    Signed-in user's cart in the ``cart_items`` table.

    Lines are denormalised with the current product row on every load, so
    they always show today's title and price. Each committed write is
    announced on the change feed scoped to the user.
    """

    def __init__(self, db: Session, feed: ChangeFeed | None = None):
        self.repo = CartRepo(db)
        self.feed = feed

    def _publish(self, event: str, user_id, row_id=None):
        if self.feed is not None:
            self.feed.publish(TABLE, event, user_id=user_id, row_id=row_id)

    # query
    def load(self, user_id) -> list[CartLine]:
        uid = parse_uuid(user_id, "user")
        return [
            CartLine(
                id=str(item.id),
                product_id=str(item.product_id),
                title=product.title or "",
                price=Decimal(str(product.price or 0)),
                qty=item.qty,
                images=list(product.images or []),
            )
            for item, product in self.repo.get_items_with_products(uid)
        ]

    # commands
    def insert_if_absent(self, user_id, product_id, qty: int) -> bool:
        """False when the (user, product) line already exists."""
        require_positive(qty, "qty")
        uid = parse_uuid(user_id, "user")
        pid = parse_uuid(product_id, "product")

        if self.repo.get_item(uid, pid):
            return False

        try:
            item = self.repo.insert_item(CartItemModel(user_id=uid, product_id=pid, qty=qty))
            self.repo.commit()
        except IntegrityError:
            # another session inserted the same key first
            self.repo.rollback()
            logger.info(f"Cart line {product_id} for user {user_id} created concurrently")
            return False

        self._publish("INSERT", uid, item.id)
        return True

    def set_quantity(self, user_id, product_id, qty: int) -> bool:
        """Sets qty exactly; False when there is no such line."""
        require_positive(qty, "qty")
        uid = parse_uuid(user_id, "user")
        try:
            pid = parse_uuid(product_id, "product")
        except ValueError:
            return False

        rowcount = self.repo.set_qty(uid, pid, qty)
        self.repo.commit()

        if rowcount:
            self._publish("UPDATE", uid)
        return bool(rowcount)

    def add_quantity(self, user_id, product_id, qty: int) -> None:
        """Create the line or increase it by ``qty`` (never overwrites)."""
        if self.insert_if_absent(user_id, product_id, qty):
            return

        uid = parse_uuid(user_id, "user")
        pid = parse_uuid(product_id, "product")
        rowcount = self.repo.add_qty(uid, pid, qty)
        self.repo.commit()
        if not rowcount:
            # insert rejected but no line to increment (e.g. product gone)
            raise Conflict(f"Cart line for product {product_id} could not be written")
        self._publish("UPDATE", uid)

    def delete(self, user_id, product_id) -> bool:
        uid = parse_uuid(user_id, "user")
        try:
            pid = parse_uuid(product_id, "product")
        except ValueError:
            # nothing can be stored under a malformed id
            return False

        rowcount = self.repo.delete_item(uid, pid)
        self.repo.commit()
        if rowcount:
            self._publish("DELETE", uid)
        return bool(rowcount)

    def delete_all(self, user_id) -> int:
        uid = parse_uuid(user_id, "user")
        rowcount = self.repo.delete_all(uid)
        self.repo.commit()
        if rowcount:
            self._publish("DELETE", uid)
        return rowcount
