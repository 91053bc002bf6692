"""API request interception and mocking."""

from e2e_suite.mocking.url_matcher import compile_pattern, url_matches
from e2e_suite.mocking.mock_registry import MockRegistry
from e2e_suite.mocking.recipes import AuthMock, CrudResource, paginate
from e2e_suite.mocking.api_mocker import ApiMocker

__all__ = [
    "compile_pattern",
    "url_matches",
    "MockRegistry",
    "AuthMock",
    "CrudResource",
    "paginate",
    "ApiMocker",
]
