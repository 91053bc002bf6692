"""Exception types raised by the e2e suite helpers.

Handler errors and retried-operation errors are never wrapped in these
types; they propagate unchanged so callers can match on the original kind.
"""

from typing import List, Optional, Any


class E2ESuiteError(Exception):
    """Base class for errors raised by the suite itself."""

    pass


class MockConfigurationError(E2ESuiteError, ValueError):
    """Raised when a mock rule cannot be registered."""

    pass


class SerializationError(E2ESuiteError):
    """Raised when a mocked response body cannot be encoded as JSON."""

    def __init__(self, message: str, method: Optional[str] = None, url: Optional[str] = None):
        super().__init__(message)
        self.method = method
        self.url = url


class ConfigurationError(E2ESuiteError, ValueError):
    """Raised on unknown environments or malformed configuration files."""

    pass


class AuthenticationError(E2ESuiteError):
    """Raised when login, token refresh or token lookup fails."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class BudgetExceededError(AssertionError):
    """Raised when collected performance metrics exceed their budget.

    Subclasses AssertionError so test-level retry treats it as a real test
    failure rather than a flaky interaction.
    """

    def __init__(self, message: str, violations: Optional[List[Any]] = None):
        super().__init__(message)
        self.violations = violations or []
