"""Unit tests for the in-memory sliding-window attempt limiter."""

import threading
from unittest.mock import Mock

import pytest

from collab_board.adapters.rate_limit.in_memory import InMemorySlidingWindowAttemptLimiter


def test_fresh_key_is_allowed() -> None:
    limiter = InMemorySlidingWindowAttemptLimiter(clock=Mock(return_value=1000.0))

    assert limiter.check_allowed(42) is True
    assert limiter.retry_after_seconds(42) is None


def test_blocks_after_five_failures_in_window() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemorySlidingWindowAttemptLimiter(max_failures=5, window_seconds=3600, clock=clock)

    for _ in range(4):
        limiter.record_failure(42)
        clock.return_value += 10
    assert limiter.check_allowed(42) is True

    limiter.record_failure(42)
    assert limiter.check_allowed(42) is False


def test_allows_again_once_window_elapses(fake_clock) -> None:
    limiter = InMemorySlidingWindowAttemptLimiter(max_failures=5, window_seconds=3600, clock=fake_clock)

    for _ in range(7):
        limiter.record_failure("p1")
    assert limiter.check_allowed("p1") is False

    fake_clock.advance(3599)
    assert limiter.check_allowed("p1") is False

    fake_clock.advance(1)
    assert limiter.check_allowed("p1") is True
    assert limiter.failure_count("p1") == 0


def test_window_slides_per_failure(fake_clock) -> None:
    limiter = InMemorySlidingWindowAttemptLimiter(max_failures=2, window_seconds=100, clock=fake_clock)

    limiter.record_failure("k")
    fake_clock.advance(60)
    limiter.record_failure("k")
    assert limiter.check_allowed("k") is False
    assert limiter.retry_after_seconds("k") == 40

    fake_clock.advance(40)
    assert limiter.check_allowed("k") is True
    assert limiter.failure_count("k") == 1


def test_keys_are_isolated() -> None:
    limiter = InMemorySlidingWindowAttemptLimiter(max_failures=1, window_seconds=60, clock=Mock(return_value=1000.0))

    limiter.record_failure("a")
    assert limiter.check_allowed("a") is False
    assert limiter.check_allowed("b") is True


def test_int_and_str_ids_share_a_key() -> None:
    limiter = InMemorySlidingWindowAttemptLimiter(max_failures=2, window_seconds=60, clock=Mock(return_value=1000.0))

    limiter.record_failure(7)
    limiter.record_failure("7")

    assert limiter.check_allowed(7) is False


def test_reset_forgets_failures() -> None:
    limiter = InMemorySlidingWindowAttemptLimiter(max_failures=1, window_seconds=60, clock=Mock(return_value=1000.0))

    limiter.record_failure("k")
    limiter.reset("k")
    limiter.reset("never-seen")

    assert limiter.check_allowed("k") is True


def test_concurrent_failures_are_not_lost() -> None:
    limiter = InMemorySlidingWindowAttemptLimiter(max_failures=1000, window_seconds=3600, clock=Mock(return_value=1000.0))

    def fail_many() -> None:
        for _ in range(50):
            limiter.record_failure("hot")

    threads = [threading.Thread(target=fail_many) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert limiter.failure_count("hot") == 400


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_failures": 0, "window_seconds": 60},
        {"max_failures": 1, "window_seconds": 0},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        InMemorySlidingWindowAttemptLimiter(**kwargs)


def test_empty_key_is_rejected() -> None:
    limiter = InMemorySlidingWindowAttemptLimiter()

    with pytest.raises(ValueError):
        limiter.check_allowed("")

    with pytest.raises(ValueError):
        limiter.record_failure("  ")
