"""Retry policy model for the retry executor."""

from typing import Any, Callable

from pydantic import BaseModel, Field, model_validator


def always_retry(error: BaseException) -> bool:
    """Default predicate: every failure is retryable."""
    return True


def retry_unless_assertion(error: BaseException) -> bool:
    """Predicate for whole-test retries: assertion failures are terminal."""
    return not isinstance(error, AssertionError)


class RetryPolicy(BaseModel):
    """Bounded retry with exponential backoff and jitter.

    A policy is built per invocation and never mutated by the executor.
    """

    max_retries: int = Field(default=3, ge=0, description="Attempts after the first")
    initial_delay_ms: int = Field(default=1000, ge=0, description="First backoff delay")
    max_delay_ms: int = Field(default=10000, ge=0, description="Backoff cap")
    jitter_ms: int = Field(
        default=1000, ge=0, description="Upper bound (exclusive) of random jitter"
    )
    should_retry: Callable[[BaseException], bool] = Field(
        default=always_retry, description="Whether a failure may be retried"
    )
    description: str = Field(default="operation", description="Label for diagnostics")

    @model_validator(mode="after")
    def _check_bounds(self) -> "RetryPolicy":
        if self.max_delay_ms < self.initial_delay_ms:
            raise ValueError(
                f"max_delay_ms ({self.max_delay_ms}) must be >= "
                f"initial_delay_ms ({self.initial_delay_ms})"
            )
        return self

    @classmethod
    def from_config(cls, config: Any, **overrides: Any) -> "RetryPolicy":
        """Build a policy from SuiteConfig retry settings.

        Args:
            config: SuiteConfig instance
            **overrides: Fields taking precedence over the config values

        Returns:
            RetryPolicy instance
        """
        values = {
            "max_retries": config.retry_max_retries,
            "initial_delay_ms": config.retry_initial_delay_ms,
            "max_delay_ms": config.retry_max_delay_ms,
            "jitter_ms": config.retry_jitter_ms,
        }
        values.update(overrides)
        return cls(**values)

    def updated(self, **updates: Any) -> "RetryPolicy":
        """Copy of the policy with some fields replaced, validated again."""
        return type(self)(**{**dict(self), **updates})
