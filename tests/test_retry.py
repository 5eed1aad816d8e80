import pytest
import redis

from storefront.utils.retry import redis_retry


def test_connection_errors_are_retried():
    calls = []

    @redis_retry(max_wait=0.1)
    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise redis.ConnectionError("connection reset")
        return "ok"

    assert flaky() == "ok"
    assert len(calls) == 3


def test_gives_up_and_reraises():
    calls = []

    @redis_retry(attempts=2, max_wait=0.1)
    def down():
        calls.append(1)
        raise redis.TimeoutError("timed out")

    with pytest.raises(redis.TimeoutError):
        down()
    assert len(calls) == 2


def test_command_errors_are_not_retried():
    calls = []

    @redis_retry()
    def wrong_type():
        calls.append(1)
        raise redis.ResponseError("WRONGTYPE")

    with pytest.raises(redis.ResponseError):
        wrong_type()
    assert calls == [1]
