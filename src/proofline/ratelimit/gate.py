# src/proofline/ratelimit/gate.py

"""Token bucket that throttles calls to the grammar oracle.

Tokens refill continuously at ``rate`` per second and accumulate up to
``burst``. The bucket starts full.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from time import monotonic

from proofline.observability import names
from proofline.observability.base import MetricsHook, NoOpMetricsHook

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateGateConfig:
    """Immutable rate settings. Defaults allow 200 calls, then one per minute."""

    rate_per_minute: float = 1.0
    burst: int = 200


class RateGate:
    """Admit at most ``burst`` calls at once, refilling at ``rate`` per second.

    ``admit`` is a suspension point. Cancelling the waiting task raises
    ``asyncio.CancelledError`` out of ``admit`` without consuming a token.
    """

    def __init__(
        self,
        rate: float,
        burst: int,
        *,
        clock: Callable[[], float] = monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        if rate <= 0:
            raise ValueError("rate must be > 0")
        if burst < 1:
            raise ValueError("burst must be >= 1")

        self._rate = rate
        self._burst = burst
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(burst)
        self._last_refill = clock()
        self._lock = asyncio.Lock()
        self.metrics_hook = metrics_hook

    @classmethod
    def from_config(
        cls,
        config: RateGateConfig,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> "RateGate":
        return cls(
            rate=config.rate_per_minute / 60.0,
            burst=config.burst,
            metrics_hook=metrics_hook,
        )

    @property
    def tokens(self) -> float:
        """Tokens available right now."""
        self._refill()
        return self._tokens

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._last_refill
        if elapsed > 0:
            self._tokens = min(float(self._burst), self._tokens + elapsed * self._rate)
            self._last_refill = now

    async def admit(self) -> None:
        """Wait until a token is available and take it."""
        start = self._clock()

        # Waiters queue on the lock so tokens are handed out in arrival order.
        async with self._lock:
            self._refill()
            while self._tokens < 1.0:
                delay = (1.0 - self._tokens) / self._rate
                logger.debug("Rate gate empty, waiting %.2fs", delay)
                await self._sleep(delay)
                self._refill()
            self._tokens -= 1.0

        waited_ms = 1000 * (self._clock() - start)
        self.metrics_hook.record_latency(names.RATE_GATE_WAIT_DURATION, waited_ms)
        self.metrics_hook.increment(names.RATE_GATE_ADMITTED_TOTAL)
        self.metrics_hook.record_gauge(names.RATE_GATE_TOKENS, self._tokens)
