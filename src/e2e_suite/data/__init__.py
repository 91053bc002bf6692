"""Test data generation."""

from e2e_suite.data.factories import DataFactory, create_api_response, create_error_response

__all__ = ["DataFactory", "create_api_response", "create_error_response"]
