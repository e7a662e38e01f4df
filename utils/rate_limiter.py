import asyncio
import logging
import time
from typing import Optional

log = logging.getLogger(__name__)


class RateLimiter:
    """
    Enforces a minimum delay between outbound requests.

    Callers sharing one instance queue on an asyncio.Lock, so concurrent
    requests are paced one after another in arrival order.
    """

    def __init__(self, min_interval_seconds: float = 1.0):
        self.min_interval_seconds = min_interval_seconds
        self._last_call: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait_if_needed(self) -> None:
        """Sleeps for whatever is left of the interval, then records this call."""
        async with self._lock:
            if self._last_call is not None:
                elapsed = time.monotonic() - self._last_call
                wait_time = self.min_interval_seconds - elapsed

                if wait_time > 0:
                    log.debug(f"Rate limiter: waiting {wait_time:.2f}s before next request")
                    await asyncio.sleep(wait_time)

            self._last_call = time.monotonic()
