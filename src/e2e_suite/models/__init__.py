"""Models package for the e2e suite."""

from .mock_models import (
    HttpMethod,
    ParsedRequest,
    MockResponse,
    StaticResponse,
    ComputedResponse,
    ResponseSource,
    MockRule,
    InterceptedRequest,
    as_response_source,
    default_headers,
    DEFAULT_STATUS,
)
from .retry_models import RetryPolicy, always_retry, retry_unless_assertion
from .performance_models import PerformanceBudget, PerformanceSnapshot, BudgetViolation

__all__ = [
    # Mock models
    "HttpMethod",
    "ParsedRequest",
    "MockResponse",
    "StaticResponse",
    "ComputedResponse",
    "ResponseSource",
    "MockRule",
    "InterceptedRequest",
    "as_response_source",
    "default_headers",
    "DEFAULT_STATUS",
    # Retry models
    "RetryPolicy",
    "always_retry",
    "retry_unless_assertion",
    # Performance models
    "PerformanceBudget",
    "PerformanceSnapshot",
    "BudgetViolation",
]
