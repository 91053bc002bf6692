"""Retry with exponential backoff for flaky UI interactions."""

from e2e_suite.retry.backoff import BackoffCalculator
from e2e_suite.retry.executor import (
    RetryExecutor,
    retry_on,
    retryable_step,
    retryable_test,
    with_retry,
)

__all__ = [
    "BackoffCalculator",
    "RetryExecutor",
    "retry_on",
    "retryable_step",
    "retryable_test",
    "with_retry",
]
