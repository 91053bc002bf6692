"""Exponential backoff with jitter."""

import random
from typing import Optional

from e2e_suite.models.retry_models import RetryPolicy


class BackoffCalculator:
    """
    Compute delays between retry attempts.

    PATTERN: Doubling delay capped at max_delay_ms, plus additive jitter
    GOTCHA: Jitter is added on top of the capped delay, so an observed wait
    can exceed max_delay_ms by up to jitter_ms
    """

    def __init__(
        self,
        initial_delay_ms: float,
        max_delay_ms: float,
        jitter_ms: float = 1000,
        multiplier: float = 2.0,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize backoff calculator.

        Args:
            initial_delay_ms: Delay before the first retry
            max_delay_ms: Cap for the exponential part of the delay
            jitter_ms: Exclusive upper bound of the uniform random jitter
            multiplier: Growth factor between consecutive delays
            rng: Random source (injectable for reproducible tests)
        """
        self.initial_delay_ms = initial_delay_ms
        self.max_delay_ms = max_delay_ms
        self.jitter_ms = jitter_ms
        self.multiplier = multiplier
        self.random = rng or random.Random()

    @classmethod
    def from_policy(cls, policy: RetryPolicy, rng: Optional[random.Random] = None) -> "BackoffCalculator":
        return cls(
            initial_delay_ms=policy.initial_delay_ms,
            max_delay_ms=policy.max_delay_ms,
            jitter_ms=policy.jitter_ms,
            rng=rng,
        )

    def calculate_delay(self, attempt: int) -> float:
        """
        Base delay (no jitter) before retry number ``attempt`` (0-indexed).

        Args:
            attempt: Retry index

        Returns:
            Delay in milliseconds
        """
        return min(self.initial_delay_ms * self.multiplier**attempt, self.max_delay_ms)

    def next_delay(self, current_delay_ms: float) -> float:
        return min(current_delay_ms * self.multiplier, self.max_delay_ms)

    def jitter(self) -> float:
        # random() is in [0, 1), so jitter stays strictly below jitter_ms
        return self.random.random() * self.jitter_ms

    def with_jitter(self, delay_ms: float) -> float:
        return delay_ms + self.jitter()
