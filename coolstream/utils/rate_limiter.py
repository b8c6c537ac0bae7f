"""
Rate Limiter Utility
Token bucket shared by every client of the same upstream service
"""
import asyncio
import time
from typing import Dict, Optional


class RateLimiter:
    """
    Token bucket refilled at ``rate`` tokens per second, holding at most
    ``capacity`` tokens. A rate of 0 or less turns the limiter off.
    """

    _instances: Dict[str, "RateLimiter"] = {}

    def __init__(self, service_name: str, rate: int, capacity: Optional[int] = None):
        self.service_name = service_name
        self.rate = rate
        self.capacity = float(capacity if capacity is not None else max(rate, 0))
        self.tokens = self.capacity
        self.last_update = time.monotonic()
        self.lock = asyncio.Lock()

    @classmethod
    def get_limiter(cls, service_name: str, rate: int) -> "RateLimiter":
        """Limiter for ``service_name``; the first caller fixes its rate"""
        limiter = cls._instances.get(service_name)
        if limiter is None:
            limiter = cls._instances[service_name] = cls(service_name, rate)
        return limiter

    @classmethod
    def reset(cls):
        """Forget all shared limiters"""
        cls._instances.clear()

    @property
    def enabled(self) -> bool:
        return self.rate > 0

    def _refill(self):
        now = time.monotonic()
        self.tokens = min(self.capacity, self.tokens + (now - self.last_update) * self.rate)
        self.last_update = now

    async def acquire(self):
        """Take one token, sleeping until the bucket has one"""
        if not self.enabled:
            return

        async with self.lock:
            self._refill()
            if self.tokens < 1:
                await asyncio.sleep((1 - self.tokens) / self.rate)
                self._refill()
            self.tokens = max(self.tokens - 1, 0.0)
