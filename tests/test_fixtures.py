"""Tests for the pytest fixtures shipped with the suite."""

import pytest

from e2e_suite.config.performance_budgets import PAGE_BUDGETS
from e2e_suite.data.factories import DataFactory
from e2e_suite.fixtures import (  # noqa: F401
    api_mocker,
    data_factory,
    performance_budgets,
    suite_config,
)
from e2e_suite.mocking.api_mocker import ApiMocker

FAILING_HANDLER_TEST = '''
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest


@pytest.fixture
def page():
    return AsyncMock()


@pytest.mark.asyncio
async def test_handler_fails_inside_route_callback(api_mocker):
    def handler(request):
        raise RuntimeError("handler failed")

    await api_mocker.mock_get("**/api/boom", handler)
    request = SimpleNamespace(
        method="GET", url="https://x/api/boom", headers={}, post_data=None
    )
    with pytest.raises(RuntimeError):
        await api_mocker.dispatch(AsyncMock(), request)
'''


@pytest.fixture
def page(mock_page):
    """Page fixture normally provided by the consuming project."""
    return mock_page


class TestFixtures:
    """Tests for suite_config, data_factory, performance_budgets and api_mocker."""

    def test_data_factory_fixture(self, data_factory):  # noqa: F811
        """Test the fixture yields a DataFactory."""
        assert isinstance(data_factory, DataFactory)

    def test_performance_budgets_default(self, performance_budgets):  # noqa: F811
        """Test the fixture yields a full budget table."""
        assert performance_budgets.keys() >= PAGE_BUDGETS.keys()

    @pytest.mark.asyncio
    async def test_api_mocker_bound_to_page(self, api_mocker, page, suite_config):  # noqa: F811
        """Test the mocker uses the page and configured defaults."""
        assert isinstance(api_mocker, ApiMocker)
        assert api_mocker.page is page
        assert api_mocker.default_page_limit == suite_config.mock_default_page_limit
        assert api_mocker.auth_username == suite_config.mock_auth_username

        await api_mocker.mock_get("**/api/users", {"users": []})
        page.route.assert_awaited_once()


class TestApiMockerTeardown:
    """Tests for the api_mocker fixture's teardown."""

    def test_handler_error_fails_the_test(self, pytester):
        """Test an error raised in a route callback is reported at teardown."""
        pytester.makeconftest('pytest_plugins = ["e2e_suite.fixtures"]\n')
        pytester.makepyfile(FAILING_HANDLER_TEST)

        result = pytester.runpytest("-p", "no:cacheprovider")

        result.assert_outcomes(passed=1, errors=1)
        result.stdout.fnmatch_lines(["*RuntimeError: handler failed*"])
