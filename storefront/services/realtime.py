# storefront/services/realtime.py
import json
from dataclasses import dataclass, asdict
from typing import Iterator

import redis
from redis.exceptions import RedisError

from storefront.data.cache import get_redis
from storefront.utils.retry import redis_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

EVENTS = ("INSERT", "UPDATE", "DELETE")


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event: str
    user_id: str | None = None
    row_id: str | None = None


def channel_name(table: str, user_id: str | None = None) -> str:
    if user_id is None:
        return f"realtime:{table}"
    return f"realtime:{table}:user_id={user_id}"


class ChangeFeed:
    """
    Row change notifications over redis pub/sub.

    Every event goes to the table channel; events carrying a user_id also go
    to the per-owner channel, so a subscriber can filter by owner.
    Publishing is best effort: a broken broker never fails the write that
    triggered the event.
    """

    def __init__(self, client: redis.Redis | None = None):
        self.redis = client or get_redis()

    @redis_retry()
    def _send(self, channel: str, payload: str) -> int:
        return self.redis.publish(channel, payload)

    def publish(self, table: str, event: str, user_id=None, row_id=None) -> None:
        if event not in EVENTS:
            raise ValueError(f"Unknown change event {event}")

        change = ChangeEvent(
            table=table,
            event=event,
            user_id=str(user_id) if user_id is not None else None,
            row_id=str(row_id) if row_id is not None else None,
        )
        payload = json.dumps(asdict(change))

        try:
            self._send(channel_name(table), payload)
            if change.user_id is not None:
                self._send(channel_name(table, change.user_id), payload)
        except RedisError as e:
            logger.warning(f"Realtime publish {table}/{event} failed: {e}")

    def subscribe(self, table: str, user_id=None) -> "Subscription":
        return Subscription(self, table, str(user_id) if user_id is not None else None)


class Subscription:
    """
    Lazy, restartable stream of ChangeEvents for one table (optionally one owner).

    ``poll()`` drains what already arrived; iterating blocks and yields events
    until ``close()``. ``resubscribe()`` points the same object at another owner.
    """

    def __init__(self, feed: ChangeFeed, table: str, user_id: str | None = None):
        self.feed = feed
        self.table = table
        self.user_id = user_id
        self.pubsub = None
        self.open()

    @property
    def channel(self) -> str:
        return channel_name(self.table, self.user_id)

    @property
    def closed(self) -> bool:
        return self.pubsub is None

    def open(self):
        if self.pubsub is not None:
            return
        self.pubsub = self.feed.redis.pubsub()
        self.pubsub.subscribe(self.channel)
        logger.info(f"Subscribed to {self.channel}")

    def close(self):
        if self.pubsub is None:
            return
        try:
            self.pubsub.unsubscribe()
            self.pubsub.close()
        except RedisError as e:
            logger.warning(f"Unsubscribe from {self.channel} failed: {e}")
        finally:
            self.pubsub = None
        logger.info(f"Unsubscribed from {self.channel}")

    def resubscribe(self, user_id=None):
        self.close()
        self.user_id = str(user_id) if user_id is not None else None
        self.open()

    def _next(self, timeout: float) -> ChangeEvent | None:
        # skips subscribe/unsubscribe confirmations; None means nothing pending
        while self.pubsub is not None:
            msg = self.pubsub.get_message(timeout=timeout)
            if msg is None:
                return None
            if msg["type"] != "message":
                continue
            try:
                return ChangeEvent(**json.loads(msg["data"]))
            except (TypeError, ValueError) as e:
                logger.warning(f"Dropping malformed change event on {self.channel}: {e}")
        return None

    def poll(self, timeout: float = 0.0) -> list[ChangeEvent]:
        events = []
        while True:
            event = self._next(timeout)
            if event is None:
                return events
            events.append(event)

    def __iter__(self) -> Iterator[ChangeEvent]:
        while self.pubsub is not None:
            event = self._next(timeout=1.0)
            if event is not None:
                yield event

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
