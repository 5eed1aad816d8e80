# storefront/services/local_cart_store.py
import redis
from pydantic import TypeAdapter, ValidationError
from redis.exceptions import RedisError

from storefront.domain.schemas import CartLine
from storefront.utils.retry import redis_retry
from storefront.utils.settings import LOCAL_CART_KEY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_LINES = TypeAdapter(list[CartLine])


class LocalCartStore:
    """
    Cart of an anonymous device: one JSON array under
    ``<LOCAL_CART_KEY>:<device_id>``.

    Reads fail soft - a missing, unreadable or unparsable value is an empty
    cart. Writes are retried and then raised to the mutation boundary.
    """

    def __init__(self, client: redis.Redis, device_id: str):
        self.redis = client
        self.device_id = device_id
        self.key = f"{LOCAL_CART_KEY}:{device_id}"

    def get(self) -> list[CartLine]:
        try:
            raw = self.redis.get(self.key)
        except RedisError as e:
            logger.warning(f"Local cart {self.key} unreadable: {e}")
            return []

        if not raw:
            return []

        try:
            return _LINES.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Local cart {self.key} is corrupt, treating as empty: {e}")
            return []

    @redis_retry()
    def put(self, lines: list[CartLine]) -> None:
        self.redis.set(self.key, _LINES.dump_json(lines))

    @redis_retry()
    def clear(self) -> None:
        self.redis.delete(self.key)
