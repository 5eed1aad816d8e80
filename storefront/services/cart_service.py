# storefront/services/cart_service.py
import uuid
from decimal import Decimal
from functools import wraps
from typing import Iterator

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import StorefrontError, NotFound
from storefront.domain.schemas import CartLine, CartOut, Notice
from storefront.repos.product_repo import ProductRepo
from storefront.services.local_cart_store import LocalCartStore
from storefront.services.remote_cart_store import RemoteCartStore, TABLE
from storefront.services.realtime import ChangeFeed, Subscription
from storefront.utils.validators import parse_uuid, require_positive
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# failures a cart mutation turns into a notice instead of raising
BOUNDARY_ERRORS = (StorefrontError, ValueError, SQLAlchemyError, RedisError)


def _line_key(product_id) -> str:
    try:
        return str(parse_uuid(product_id))
    except NotFound:
        return str(product_id)


def mutation(failure: str):
    """Run a cart command; log and surface any store failure as a notice."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(self, *args, **kwargs):
            try:
                return fn(self, *args, **kwargs)
            except BOUNDARY_ERRORS as e:
                self.db.rollback()
                logger.error(f"{fn.__name__} failed for {self.owner_label}: {e}")
                description = str(e) if isinstance(e, NotFound) else failure
                self.notify("Error", description, variant="destructive")
                return None

        return wrapper

    return decorator


class CartService:
    """
    One session's cart, whoever owns it.

    Anonymous sessions work against the device store, signed-in sessions
    against the user's rows in the database. ``sign_in`` is the only place the
    two meet: the device cart is merged additively into the user's cart and
    then discarded, so repeated sign-ins never replay it.

    Totals are derived from ``items`` on every access and never stored.
    """

    def __init__(self, db: Session, local_store: LocalCartStore, remote_store: RemoteCartStore):
        self.db = db
        self.products = ProductRepo(db)
        self.local_store = local_store
        self.remote_store = remote_store

        self.user_id: str | None = None
        self.items: list[CartLine] = []
        self.notices: list[Notice] = []

        self.feed: ChangeFeed | None = None
        self.subscription: Subscription | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def owner_label(self) -> str:
        if self.is_authenticated:
            return f"user {self.user_id}"
        return f"device {self.local_store.device_id}"

    @property
    def total_items(self) -> int:
        return sum(line.qty for line in self.items)

    @property
    def total_amount(self) -> Decimal:
        return sum((line.price * line.qty for line in self.items), Decimal("0.00"))

    def notify(self, title: str, description: str, variant: str = "default"):
        self.notices.append(Notice(title=title, description=description, variant=variant))

    def snapshot(self) -> CartOut:
        return CartOut(
            owner="user" if self.is_authenticated else "device",
            user_id=self.user_id,
            items=[line.model_copy() for line in self.items],
            total_items=self.total_items,
            total_amount=self.total_amount,
            notices=list(self.notices),
        )

    # =====================================================
    # OWNER TRANSITIONS
    # =====================================================
    def start(self, user_id=None) -> "CartService":
        """Attach to an owner that is already signed in (or not); no merge."""
        self.user_id = str(user_id) if user_id is not None else None
        self._retarget()
        self.reload()
        return self

    def sign_in(self, user_id) -> CartOut:
        user_id = str(user_id)
        if self.user_id == user_id:
            # same sign-in event seen twice
            return self.snapshot()

        logger.info(f"Sign-in of user {user_id} on device {self.local_store.device_id}")
        self.user_id = user_id
        self._retarget()
        self.sync_local_cart()
        self.reload()
        return self.snapshot()

    def sign_out(self) -> CartOut:
        if self.user_id is None:
            return self.snapshot()

        logger.info(f"Sign-out of user {self.user_id}, cart stays server-side")
        self.user_id = None
        self._retarget()
        self.reload()
        return self.snapshot()

    def sync_local_cart(self) -> int:
        """
        Merge the device cart into the signed-in user's cart.

        Quantities are added, never overwritten. The device cart is cleared
        afterwards no matter how many merges failed; unmerged lines are lost.
        """
        if not self.is_authenticated:
            return 0

        lines = self.local_store.get()
        if not lines:
            return 0

        merged = 0
        try:
            for line in lines:
                try:
                    self._get_product(line.product_id)
                    self.remote_store.add_quantity(self.user_id, line.product_id, line.qty)
                    merged += 1
                except BOUNDARY_ERRORS as e:
                    self.db.rollback()
                    logger.warning(
                        f"Dropping local cart line {line.product_id} x{line.qty} "
                        f"for user {self.user_id}: {e}"
                    )
        finally:
            try:
                self.local_store.clear()
            except RedisError as e:
                logger.error(f"Could not clear local cart of device {self.local_store.device_id}: {e}")

        logger.info(f"Merged {merged}/{len(lines)} local cart lines into cart of user {self.user_id}")
        return merged

    # =====================================================
    # QUERY
    # =====================================================
    def reload(self) -> list[CartLine]:
        if not self.is_authenticated:
            self.items = self.local_store.get()
            return self.items

        try:
            self.items = self.remote_store.load(self.user_id)
        except (StorefrontError, SQLAlchemyError) as e:
            self.db.rollback()
            logger.error(f"Error loading cart of user {self.user_id}: {e}")
            self.items = []
        return self.items

    # =====================================================
    # COMMANDS
    # =====================================================
    def _get_product(self, product_id) -> ProductModel:
        product = self.products.get_product(parse_uuid(product_id, "Product"))
        if product is None:
            raise NotFound(f"Product {product_id} not found")
        return product

    @mutation("Failed to add item to cart.")
    def add_to_cart(self, product_id, qty: int = 1) -> CartOut:
        require_positive(qty, "qty")
        product = self._get_product(product_id)

        if not self.is_authenticated:
            lines = self.local_store.get()
            key = str(product.id)
            existing = next((line for line in lines if line.product_id == key), None)

            if existing:
                existing.qty += qty
            else:
                lines.append(
                    CartLine(
                        id=uuid.uuid4().hex,
                        product_id=key,
                        title=product.title,
                        price=Decimal(str(product.price)),
                        qty=qty,
                        images=list(product.images or []),
                    )
                )

            self.local_store.put(lines)
            self.items = lines
        else:
            self.remote_store.add_quantity(self.user_id, product.id, qty)
            self.reload()

        logger.info(f"Added product {product.id} x{qty} to cart of {self.owner_label}")
        self.notify("Added to cart", f"{product.title} has been added to your cart.")
        return self.snapshot()

    @mutation("Failed to update quantity.")
    def update_quantity(self, product_id, qty: int) -> CartOut:
        if qty <= 0:
            self._remove(product_id)
            return self.snapshot()

        if not self.is_authenticated:
            key = _line_key(product_id)
            lines = self.local_store.get()
            changed = False
            for line in lines:
                if line.product_id == key:
                    line.qty = qty
                    changed = True
            if changed:
                self.local_store.put(lines)
            self.items = lines
        else:
            self.remote_store.set_quantity(self.user_id, product_id, qty)
            self.reload()

        return self.snapshot()

    @mutation("Failed to remove item from cart.")
    def remove_from_cart(self, product_id) -> CartOut:
        self._remove(product_id)
        return self.snapshot()

    def _remove(self, product_id):
        if not self.is_authenticated:
            key = _line_key(product_id)
            lines = self.local_store.get()
            kept = [line for line in lines if line.product_id != key]
            removed = len(kept) != len(lines)
            if removed:
                self.local_store.put(kept)
            self.items = kept
        else:
            removed = self.remote_store.delete(self.user_id, product_id)
            self.reload()

        if removed:
            self.notify("Removed from cart", "Item has been removed from your cart.")

    @mutation("Failed to clear cart.")
    def clear_cart(self) -> CartOut:
        if not self.is_authenticated:
            self.local_store.clear()
            self.items = []
        else:
            self.remote_store.delete_all(self.user_id)
            self.reload()
        return self.snapshot()

    # =====================================================
    # REALTIME
    # =====================================================
    def subscribe(self, feed: ChangeFeed) -> Subscription | None:
        """Follow the active owner's cart rows; a device cart has no feed."""
        self.feed = feed
        self._retarget()
        return self.subscription

    def _retarget(self):
        if self.feed is None:
            return

        if self.user_id is None:
            self.unsubscribe()
        elif self.subscription is None:
            self.subscription = self.feed.subscribe(TABLE, self.user_id)
        elif self.subscription.user_id != self.user_id:
            self.subscription.resubscribe(self.user_id)

    def poll(self, timeout: float = 0.0) -> bool:
        """Reload once if any change arrived; True when it did."""
        if self.subscription is None:
            return False
        events = self.subscription.poll(timeout)
        if events:
            logger.info(f"{len(events)} cart change(s) for {self.owner_label}, reloading")
            self.reload()
        return bool(events)

    def follow(self) -> Iterator[CartOut]:
        if self.subscription is None:
            return
        for _event in self.subscription:
            self.reload()
            yield self.snapshot()

    def unsubscribe(self):
        if self.subscription is not None:
            self.subscription.close()
            self.subscription = None
