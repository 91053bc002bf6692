"""Authentication helpers."""

from e2e_suite.auth.auth_manager import AuthManager

__all__ = ["AuthManager"]
