# storefront/utils/retry.py
import logging

import redis
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def redis_retry(attempts: int = 3, max_wait: float = 1.0):
    """Retry transient Redis errors with backoff, then re-raise the last one."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=max_wait),
        retry=retry_if_exception_type((redis.ConnectionError, redis.TimeoutError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
