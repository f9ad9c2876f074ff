"""
Unit tests for batching and pacing helpers.
"""
import asyncio
import threading
import time

import pytest
from django.core.cache.backends.locmem import LocMemCache

from notifications.application.services.batching import RateLimitedQueue, chunked, shared_queue


class TestChunked:
    """Tests for chunked."""

    def test_even_split(self):
        assert list(chunked([1, 2, 3, 4], 2)) == [[1, 2], [3, 4]]

    def test_remainder(self):
        assert list(chunked(list(range(5)), 2)) == [[0, 1], [2, 3], [4]]

    def test_empty(self):
        assert list(chunked([], 100)) == []

    def test_default_size(self):
        assert [len(chunk) for chunk in chunked(list(range(250)))] == [100, 100, 50]

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            list(chunked([1], 0))


class CountingCall:
    """Synchronous call recording how many invocations overlap."""

    def __init__(self, duration=0.0):
        self.duration = duration
        self.calls = []
        self.started = []
        self.in_flight = 0
        self.peak = 0
        self._lock = threading.Lock()

    def __call__(self, value):
        with self._lock:
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
            self.calls.append(value)
            self.started.append(time.monotonic())
        time.sleep(self.duration)
        with self._lock:
            self.in_flight -= 1
        return value * 2


@pytest.mark.asyncio
class TestRateLimitedQueue:
    """Tests for RateLimitedQueue."""

    async def test_results_in_order(self):
        queue = RateLimitedQueue(requests_per_second=1000)
        call = CountingCall()

        results = [await queue.add(call, value) for value in range(5)]

        assert results == [0, 2, 4, 6, 8]
        assert call.calls == [0, 1, 2, 3, 4]
        assert len(queue) == 0

    async def test_one_call_at_a_time(self):
        queue = RateLimitedQueue(requests_per_second=1000)
        call = CountingCall(duration=0.02)

        await asyncio.gather(*[queue.add(call, value) for value in range(4)])

        assert call.peak == 1
        assert sorted(call.calls) == [0, 1, 2, 3]

    async def test_exception_propagates_and_queue_continues(self):
        queue = RateLimitedQueue(requests_per_second=1000)

        def boom():
            raise RuntimeError("lookup failed")

        with pytest.raises(RuntimeError, match="lookup failed"):
            await queue.add(boom)

        assert await queue.add(str.upper, "ok") == "OK"
        assert len(queue) == 0

    async def test_pacing(self):
        """Test consecutive calls are spaced by the configured delay."""
        queue = RateLimitedQueue(requests_per_second=20)
        call = CountingCall()

        for value in range(3):
            await queue.add(call, value)

        assert queue.delay == pytest.approx(0.05)
        assert call.started[2] - call.started[0] >= 0.09

    async def test_leaves_no_background_tasks(self):
        queue = RateLimitedQueue(requests_per_second=1000)

        await queue.add(CountingCall(), 1)

        assert asyncio.all_tasks() == {asyncio.current_task()}


class TestSharedPacing:
    """Tests for pacing shared between event loops and processes."""

    def test_serializes_calls_from_separate_event_loops(self):
        queue = RateLimitedQueue(requests_per_second=1000)
        call = CountingCall(duration=0.05)

        def fetch(value):
            asyncio.run(queue.add(call, value))

        threads = [threading.Thread(target=fetch, args=(value,)) for value in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert call.peak == 1
        assert sorted(call.calls) == [0, 1, 2]

    def test_window_counter_limits_calls_per_second(self, monkeypatch):
        monkeypatch.setattr(time, "time", lambda: 1_700_000_000.25)
        cache = LocMemCache("pacing", {})
        queue = RateLimitedQueue(requests_per_second=2, cache=cache, cache_key="rate_limit:test")

        assert queue._claim_window() is True
        assert queue._claim_window() is True
        assert queue._claim_window() is False

    def test_shared_queue_is_one_instance_per_name(self):
        first = shared_queue("test-status", 5)
        second = shared_queue("test-status", 50)

        assert first is second
        assert first.delay == pytest.approx(0.2)
        assert first.cache_key == "rate_limit:test-status"


def test_rate_limited_queue_rejects_non_positive_rate():
    with pytest.raises(ValueError):
        RateLimitedQueue(requests_per_second=0)
