"""
Batching and pacing helpers for provider calls.
"""
import logging
import threading
import time
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, TypeVar

from asgiref.sync import sync_to_async

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CHUNK_SIZE = 100
WINDOW_SECONDS = 1


def chunked(items: Sequence[T], size: int = DEFAULT_CHUNK_SIZE) -> Iterator[List[T]]:
    """
    Split a sequence into consecutive chunks of at most ``size`` items.

    Raises:
        ValueError: If size is not positive
    """
    if size <= 0:
        raise ValueError("Chunk size must be positive")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


class RateLimitedQueue:
    """
    FIFO queue running one call at a time with a fixed pause between them.

    Turns are handed out in arrival order to every thread and event loop
    of the process, so one instance paces the whole process. The pause is
    ``1 / requests_per_second`` after the previous call started and costs
    nothing once it has elapsed.

    With a Django ``cache``, each call also claims a slot in a one-second
    window counter, which keeps processes sharing the cache under
    ``requests_per_second`` together.
    """

    def __init__(
        self,
        requests_per_second: float = 2.0,
        cache: Optional[Any] = None,
        cache_key: str = "rate_limit:queue",
    ):
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self.delay = 1.0 / requests_per_second
        self.window_limit = max(1, int(requests_per_second * WINDOW_SECONDS))
        self.cache = cache
        self.cache_key = cache_key
        self._turns = threading.Condition()
        self._next_ticket = 0
        self._now_serving = 0
        self._ready_at = 0.0

    def __len__(self) -> int:
        """Calls holding or waiting for a turn."""
        with self._turns:
            return self._next_ticket - self._now_serving

    def run(self, call: Callable[..., T], *args: Any) -> T:
        """
        Run ``call(*args)`` when its turn comes, blocking the calling thread.

        Returns:
            The result of ``call(*args)``; its exception propagates after
            the turn is released.
        """
        with self._turns:
            ticket = self._next_ticket
            self._next_ticket += 1
            while ticket != self._now_serving:
                self._turns.wait()
        try:
            self._wait_for_slot()
            return call(*args)
        finally:
            with self._turns:
                self._now_serving += 1
                self._turns.notify_all()

    async def add(self, call: Callable[..., T], *args: Any) -> T:
        """Await ``call(*args)``, run in a worker thread when its turn comes."""
        return await sync_to_async(self.run, thread_sensitive=False)(call, *args)

    def _wait_for_slot(self) -> None:
        pause = self._ready_at - time.monotonic()
        if pause > 0:
            time.sleep(pause)
        if self.cache is not None:
            while not self._claim_window():
                wait = WINDOW_SECONDS - time.time() % WINDOW_SECONDS
                logger.debug("Shared rate limit reached", extra={"key": self.cache_key, "wait": wait})
                time.sleep(wait)
        self._ready_at = time.monotonic() + self.delay

    def _claim_window(self) -> bool:
        window = int(time.time() / WINDOW_SECONDS)
        key = f"{self.cache_key}:{window}"
        timeout = WINDOW_SECONDS * 2
        if self.cache.add(key, 1, timeout=timeout):
            return True
        try:
            count = self.cache.incr(key)
        except ValueError:
            # Window key expired between add and incr
            self.cache.set(key, 1, timeout=timeout)
            return True
        return count <= self.window_limit


_shared_queues: Dict[str, RateLimitedQueue] = {}
_shared_lock = threading.Lock()


def shared_queue(
    name: str, requests_per_second: float, cache: Optional[Any] = None
) -> RateLimitedQueue:
    """
    Process-wide queue registered under ``name``.

    The first caller's rate and cache configure it; later callers get the
    same instance.
    """
    with _shared_lock:
        queue = _shared_queues.get(name)
        if queue is None:
            queue = RateLimitedQueue(
                requests_per_second, cache=cache, cache_key=f"rate_limit:{name}"
            )
            _shared_queues[name] = queue
        return queue
