"""
Fixed-window rate limiting.

The limiter only computes windows; counting lives in a RateWindowStore
whose try_acquire is atomic per partition, so the in-process table can be
swapped for a shared counter without touching the flows.
"""

import math
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from authcore.domain.entities import AdmissionResult

DEFAULT_PERMIT_LIMIT = 5
DEFAULT_WINDOW_SECONDS = 60
DEFAULT_FALLBACK_KEY = "global"


class RateWindowStore(ABC):
    """Shared table of per-partition window counters"""

    @abstractmethod
    async def try_acquire(
        self, partition_key: str, window_start: int, window_seconds: int, permit_limit: int
    ) -> bool:
        """
        Atomically take one permit from the partition's window.

        A stored window whose start differs from window_start is reset to
        zero first. Returns False, without incrementing, once the window
        already holds permit_limit admissions.
        """
        pass


class RateLimiter:
    def __init__(
        self,
        store: RateWindowStore,
        permit_limit: int = DEFAULT_PERMIT_LIMIT,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        fallback_key: str = DEFAULT_FALLBACK_KEY,
        clock: Callable[[], float] = time.time,
    ):
        if permit_limit < 1:
            raise ValueError("permit_limit must be at least 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be at least 1")
        self.store = store
        self.permit_limit = permit_limit
        self.window_seconds = window_seconds
        self.fallback_key = fallback_key
        self.clock = clock

    def partition_key_for(self, client_address: Optional[str]) -> str:
        return client_address or self.fallback_key

    def current_window_start(self) -> int:
        now = self.clock()
        return int(now // self.window_seconds) * self.window_seconds

    def seconds_until_reset(self) -> int:
        end = self.current_window_start() + self.window_seconds
        return max(1, math.ceil(end - self.clock()))

    async def admit(self, partition_key: str) -> AdmissionResult:
        allowed = await self.store.try_acquire(
            partition_key or self.fallback_key,
            self.current_window_start(),
            self.window_seconds,
            self.permit_limit,
        )
        return AdmissionResult.allowed if allowed else AdmissionResult.denied
