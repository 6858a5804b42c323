"""Retry Policy — attempt bounds and exponential backoff with jitter.

Invariants:
    - attempts = max_retries + 1 (the first try is not a retry)
    - backoff(n) = min(max_delay_ms, 2**n * base_delay_ms) scaled by ±25% jitter
    - A server Retry-After hint replaces the computed delay, capped at max_delay_ms
    - should_retry() is False once the attempt budget or the elapsed budget is spent

Design Decisions:
    - ±25% jitter: prevents thundering herd on shared rate limits
    - Pure dataclass with an injectable random source: deterministic in tests
"""

import random
from collections.abc import Callable
from dataclasses import dataclass, field

from orb_billing.core.errors import UsageError


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 60_000
    max_elapsed_seconds: float = 300.0
    jitter: Callable[[float, float], float] = field(default=random.uniform, repr=False, compare=False)

    def __post_init__(self):
        if self.max_retries < 0:
            raise UsageError("max_retries must be >= 0", field="max_retries")
        if self.base_delay_ms < 0 or self.max_delay_ms < self.base_delay_ms:
            raise UsageError(
                f"Invalid retry delay window (base={self.base_delay_ms}ms, max={self.max_delay_ms}ms)",
                field="max_delay_ms",
            )

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def backoff_ms(self, attempt: int, retry_after_ms: int | None = None) -> int:
        """Delay before the retry that follows zero-based `attempt`."""
        if retry_after_ms is not None:
            return min(self.max_delay_ms, max(0, retry_after_ms))
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * self.jitter(0.75, 1.25))  # nosec B311

    def should_retry(self, attempt: int, elapsed_s: float, delay_ms: int) -> bool:
        """Whether another attempt fits after zero-based `attempt` failed."""
        if attempt + 1 >= self.max_attempts:
            return False
        return elapsed_s + delay_ms / 1000 <= self.max_elapsed_seconds
