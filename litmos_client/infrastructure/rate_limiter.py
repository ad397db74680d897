"""asyncio implementation of the RateLimiter port."""

import asyncio
import logging
import time
from typing import Callable, Optional

from ..application.domain import RateLimiter, RequestState

logger = logging.getLogger(__name__)


async def wait_for_slot(
    last_request_time: Optional[float],
    rate_per_minute: Optional[int],
    clock: Callable[[], float] = time.monotonic,
    verbose: bool = False,
) -> float:
    """
    Suspends until a request may be sent under a per-minute budget.

    Args:
        last_request_time: Clock reading of the previous dispatch, or None.
        rate_per_minute: Allowed requests per minute. Falsy disables limiting.
        clock: Monotonic clock returning seconds.
        verbose: Log waits at INFO instead of DEBUG.

    Returns:
        The dispatch instant to record for this request. After a wait this is
        the scheduled slot rather than the wake-up time, so consecutive
        requests keep a steady cadence.
    """

    now = clock()
    if not rate_per_minute or last_request_time is None:
        return now

    min_interval = 60.0 / rate_per_minute
    next_slot = last_request_time + min_interval
    if now >= next_slot:
        return now

    delay = next_slot - now
    logger.log(
        logging.INFO if verbose else logging.DEBUG,
        f"Rate limited. Performing next request in {delay * 1000:.0f}ms.",
    )
    await asyncio.sleep(delay)
    return next_slot


class AsyncRateLimiter(RateLimiter):
    """Paces the requests of one client instance."""

    def __init__(
        self,
        state: RequestState,
        rate_per_minute: Optional[int] = None,
        verbose: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.state = state
        self.rate_per_minute = rate_per_minute
        self.verbose = verbose
        self.clock = clock
        # Concurrent callers must see each other's slots
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Waits for the next slot and records it as the last request time."""
        async with self._lock:
            self.state.last_request_time = await wait_for_slot(
                self.state.last_request_time,
                self.rate_per_minute,
                clock=self.clock,
                verbose=self.verbose,
            )
