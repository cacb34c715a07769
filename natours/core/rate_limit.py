"""In-process rate limiter backend."""

import asyncio
import math
import time
from collections import OrderedDict, deque
from typing import Callable, Protocol


class RateLimiter(Protocol):
    """Backend contract shared by the memory and Redis limiters."""

    async def is_allowed(
        self, key: str, max_requests: int, window_seconds: int = 60
    ) -> tuple[bool, int, int]:
        ...

    async def reset(self, key: str) -> None:
        ...


class MemoryRateLimiter:
    """
    Sliding window rate limiter kept in process memory.

    Each key holds the timestamps of its hits inside the current window.
    Keys are ordered by their latest hit, so expired keys are always at the
    front and each call only evicts what has actually expired. Counts are
    per process, so run the Redis backend when serving with several workers.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._hits: OrderedDict[str, deque[float]] = OrderedDict()
        self._lock = asyncio.Lock()

    async def is_allowed(
        self, key: str, max_requests: int, window_seconds: int = 60
    ) -> tuple[bool, int, int]:
        """
        Check if a request is allowed under rate limit.

        Returns:
            Tuple of (is_allowed, remaining_requests, retry_after_seconds)
        """
        async with self._lock:
            now = self._clock()
            self._evict(now - window_seconds)
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= now - window_seconds:
                hits.popleft()

            if len(hits) >= max_requests:
                if not hits:
                    return False, 0, window_seconds
                retry_after = math.ceil(hits[0] + window_seconds - now)
                return False, 0, max(retry_after, 1)

            hits.append(now)
            self._hits.move_to_end(key)
            return True, max_requests - len(hits), 0

    async def reset(self, key: str) -> None:
        """Reset rate limit for a key."""
        async with self._lock:
            self._hits.pop(key, None)

    def _evict(self, cutoff: float) -> None:
        # Front keys have the oldest latest hit; stop at the first live one
        while self._hits:
            key, hits = next(iter(self._hits.items()))
            if hits and hits[-1] > cutoff:
                return
            del self._hits[key]

    def __len__(self) -> int:
        return len(self._hits)
