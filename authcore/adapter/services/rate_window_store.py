import asyncio
from typing import Dict

from redis.asyncio import Redis

from authcore.app.services.rate_limiter import RateWindowStore
from authcore.domain.entities import RateWindow

# Windows older than the current one are dropped once the table grows past this
PRUNE_THRESHOLD = 1024

# KEYS[1] = window key, ARGV[1] = permit limit, ARGV[2] = window length (ms)
ACQUIRE_SCRIPT = """
local current = tonumber(redis.call('GET', KEYS[1]) or '0')
if current >= tonumber(ARGV[1]) then
    return 0
end
current = redis.call('INCR', KEYS[1])
if current == 1 then
    redis.call('PEXPIRE', KEYS[1], ARGV[2])
end
return 1
"""


class InMemoryRateWindowStore(RateWindowStore):
    """Single-process window table guarded by one asyncio lock"""

    def __init__(self):
        self.windows: Dict[str, RateWindow] = {}
        self._lock = asyncio.Lock()

    async def try_acquire(
        self, partition_key: str, window_start: int, window_seconds: int, permit_limit: int
    ) -> bool:
        async with self._lock:
            window = self.windows.get(partition_key)
            if window is None or window.window_start != window_start:
                if window is None and len(self.windows) >= PRUNE_THRESHOLD:
                    self._prune(window_start)
                window = RateWindow(partition_key=partition_key, window_start=window_start)
                self.windows[partition_key] = window

            if window.count >= permit_limit:
                return False
            window.count += 1
            return True

    def _prune(self, window_start: int) -> None:
        stale = [key for key, w in self.windows.items() if w.window_start < window_start]
        for key in stale:
            del self.windows[key]


class RedisRateWindowStore(RateWindowStore):
    """Window counters shared by every instance through Redis"""

    def __init__(self, redis: Redis, key_prefix: str = "ratelimit"):
        self.redis = redis
        self.key_prefix = key_prefix

    def _key(self, partition_key: str, window_start: int) -> str:
        return f"{self.key_prefix}:{partition_key}:{window_start}"

    async def try_acquire(
        self, partition_key: str, window_start: int, window_seconds: int, permit_limit: int
    ) -> bool:
        acquired = await self.redis.eval(
            ACQUIRE_SCRIPT,
            1,
            self._key(partition_key, window_start),
            permit_limit,
            window_seconds * 1000,
        )
        return int(acquired) == 1
