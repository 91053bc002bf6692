"""Browser end-to-end test helpers for Playwright.

This package provides:
- API request mocking with wildcard URL patterns and per-request handlers
- Paginated, CRUD and authentication mock recipes
- Retry with exponential backoff and jitter for flaky interactions
- Test data factories
- Authentication and performance budget helpers
"""

from e2e_suite.errors import (
    AuthenticationError,
    BudgetExceededError,
    ConfigurationError,
    E2ESuiteError,
    MockConfigurationError,
    SerializationError,
)
from e2e_suite.models import HttpMethod, MockResponse, MockRule, ParsedRequest, RetryPolicy
from e2e_suite.mocking import ApiMocker, CrudResource, MockRegistry, url_matches
from e2e_suite.retry import RetryExecutor, retryable_step, retryable_test, with_retry
from e2e_suite.data import DataFactory

__version__ = "0.1.0"

__all__ = [
    "AuthenticationError",
    "BudgetExceededError",
    "ConfigurationError",
    "E2ESuiteError",
    "MockConfigurationError",
    "SerializationError",
    "HttpMethod",
    "MockResponse",
    "MockRule",
    "ParsedRequest",
    "RetryPolicy",
    "ApiMocker",
    "CrudResource",
    "MockRegistry",
    "url_matches",
    "RetryExecutor",
    "retryable_step",
    "retryable_test",
    "with_retry",
    "DataFactory",
]
