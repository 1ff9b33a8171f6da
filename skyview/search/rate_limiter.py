"""Minimum spacing between outbound search requests."""

import logging
import time
from collections.abc import Callable

from skyview.search.cancel import CancelToken

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.min_interval = min_interval
        self.clock = clock
        self.last_request_at: float | None = None

    def remaining(self) -> float:
        """Seconds left before another request may be dispatched."""
        if self.last_request_at is None:
            return 0.0
        return max(0.0, self.last_request_at + self.min_interval - self.clock())

    async def acquire(self, token: CancelToken) -> None:
        """Wait out the remaining interval, then stamp the dispatch time.

        The final check and the stamp happen without an intervening await,
        so overlapping callers never both observe a free slot.
        """
        while True:
            delay = self.remaining()
            if delay <= 0:
                self.last_request_at = self.clock()
                return
            logger.debug("Rate limiting search, waiting %.3fs", delay)
            await token.sleep(delay)
