"""Retry execution with exponential backoff for flaky async operations.

The executor runs an operation, and on failure waits
``current_delay + jitter`` before the next attempt, doubling
``current_delay`` up to the policy's cap. The original exception is always
re-raised unchanged once attempts are exhausted or the policy's predicate
rejects it.

Cancellation: only an outer timeout (e.g. ``asyncio.wait_for``) can stop a
retried call. Cancelling interrupts the current await, but side effects
already started by an abandoned attempt (a click, a request sent by the
page) may still complete afterwards.
"""

import asyncio
import inspect
import logging
import random
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, Type, TypeVar, Union

from e2e_suite.models.retry_models import RetryPolicy, always_retry, retry_unless_assertion
from e2e_suite.retry.backoff import BackoffCalculator

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[], Union[Awaitable[T], T]]
SleepFunc = Callable[[float], Awaitable[Any]]


def retry_on(*exception_types: Type[BaseException]) -> Callable[[BaseException], bool]:
    """Build a predicate that only retries the given exception types."""

    def predicate(error: BaseException) -> bool:
        return isinstance(error, exception_types)

    return predicate


class RetryExecutor:
    """
    Execute async operations under a RetryPolicy.

    PATTERN: Stateless executor; attempt counter and delay live in one call
    CRITICAL: Total attempts never exceed max_retries + 1
    GOTCHA: Only Exception subclasses are retried; CancelledError propagates
    """

    def __init__(
        self,
        sleep: Optional[SleepFunc] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize retry executor.

        Args:
            sleep: Coroutine used to wait between attempts (seconds)
            rng: Random source for jitter
        """
        self._sleep = sleep or asyncio.sleep
        self._rng = rng

    async def execute(self, operation: Operation, policy: Optional[RetryPolicy] = None) -> Any:
        """
        Run an operation until it succeeds or the policy gives up.

        Args:
            operation: Zero-argument callable returning an awaitable (or a value)
            policy: Retry policy (defaults to RetryPolicy())

        Returns:
            The operation's result

        Raises:
            Exception: The operation's last error, unchanged
        """
        policy = policy or RetryPolicy()
        backoff = BackoffCalculator.from_policy(policy, rng=self._rng)
        total_attempts = policy.max_retries + 1
        current_delay = float(policy.initial_delay_ms)
        attempt = 0

        while True:
            try:
                result = operation()
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                if attempt >= policy.max_retries:
                    logger.error(
                        f"All {total_attempts} attempts failed for {policy.description}: {e}"
                    )
                    raise
                if not policy.should_retry(e):
                    logger.error(
                        f"Non-retryable failure for {policy.description} "
                        f"on attempt {attempt + 1}/{total_attempts}: {e}"
                    )
                    raise

                wait_ms = backoff.with_jitter(current_delay)
                logger.warning(
                    f"Attempt {attempt + 1}/{total_attempts} failed for {policy.description}: {e}. "
                    f"Retrying in {wait_ms:.0f}ms..."
                )
                await self._sleep(wait_ms / 1000.0)
                current_delay = backoff.next_delay(current_delay)
                attempt += 1
                continue

            if attempt > 0:
                logger.info(
                    f"{policy.description} succeeded on attempt {attempt + 1}/{total_attempts}"
                )
            return result


async def with_retry(
    operation: Operation,
    policy: Optional[RetryPolicy] = None,
    **policy_fields: Any,
) -> Any:
    """
    Run an operation with retry, building the policy from keywords if needed.

    Args:
        operation: Zero-argument callable returning an awaitable
        policy: Retry policy; keyword fields override it
        **policy_fields: RetryPolicy fields

    Returns:
        The operation's result

    Example:
        await with_retry(lambda: page.click("#submit"), max_retries=2)
    """
    if policy is None:
        policy = RetryPolicy(**policy_fields)
    elif policy_fields:
        policy = policy.updated(**policy_fields)
    return await RetryExecutor().execute(operation, policy)


def retryable_step(
    description: str,
    step: Callable[..., Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    executor: Optional[RetryExecutor] = None,
) -> Callable[..., Awaitable[T]]:
    """
    Bind a description and policy to a step function.

    Args:
        description: Label used in retry diagnostics
        step: Async function to retry
        policy: Retry policy (description is replaced)
        executor: Executor to run under (a fresh one by default)

    Returns:
        Async function with the same signature as ``step``

    Example:
        login = retryable_step("log in", login_page.login)
        await login("user", "secret")
    """
    bound_policy = (policy or RetryPolicy()).updated(description=description)

    @wraps(step)
    async def wrapper(*args, **kwargs):
        return await (executor or RetryExecutor()).execute(
            lambda: step(*args, **kwargs), bound_policy
        )

    return wrapper


def retryable_test(
    test_func: Optional[Callable[..., Awaitable[Any]]] = None,
    *,
    policy: Optional[RetryPolicy] = None,
    should_retry: Optional[Callable[[BaseException], bool]] = None,
    executor: Optional[RetryExecutor] = None,
):
    """
    Retry a whole async test body on flaky errors.

    Assertion failures (AssertionError, which includes pytest and Playwright
    ``expect`` failures) are terminal by default; any other error is
    retried. A ``should_retry`` argument, or a policy with its own
    predicate, replaces that default.

    Usable bare or with arguments:

        @retryable_test
        async def test_checkout(page): ...

        @retryable_test(policy=RetryPolicy(max_retries=1))
        async def test_search(page): ...
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        base = policy or RetryPolicy()
        predicate = should_retry
        if predicate is None:
            predicate = (
                base.should_retry if base.should_retry is not always_retry else retry_unless_assertion
            )
        test_policy = base.updated(should_retry=predicate, description=f"test {func.__name__}")

        @wraps(func)
        async def wrapper(*args, **kwargs):
            return await (executor or RetryExecutor()).execute(
                lambda: func(*args, **kwargs), test_policy
            )

        return wrapper

    if test_func is not None:
        return decorator(test_func)
    return decorator
