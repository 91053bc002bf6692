"""pytest fixtures for tests built on the e2e suite.

Enable them from a conftest.py:

    pytest_plugins = ["e2e_suite.fixtures"]

The consuming project provides the ``page`` fixture; launching browsers is
left to it.
"""

import os
from typing import Dict

import pytest
import pytest_asyncio

from e2e_suite.config.performance_budgets import budgets_for_config
from e2e_suite.config.settings import SuiteConfig
from e2e_suite.data.factories import DataFactory
from e2e_suite.mocking.api_mocker import ApiMocker
from e2e_suite.models.performance_models import PerformanceBudget


@pytest.fixture
def suite_config() -> SuiteConfig:
    """Suite configuration loaded from the environment."""
    return SuiteConfig()


@pytest.fixture
def data_factory() -> DataFactory:
    """Data factory, reproducible when E2E_SEED is set."""
    seed = os.getenv("E2E_SEED")
    return DataFactory(seed=int(seed) if seed else None)


@pytest.fixture
def performance_budgets(suite_config) -> Dict[str, PerformanceBudget]:
    """Page budgets, with E2E_PERFORMANCE_BUDGETS overrides applied."""
    return budgets_for_config(suite_config)


@pytest_asyncio.fixture
async def api_mocker(page, suite_config):
    """ApiMocker bound to the test's page.

    Teardown re-raises the first error recorded in a route callback, so a
    failing response handler fails the test, then removes the route.
    """
    async with ApiMocker.from_config(page, suite_config) as mocker:
        yield mocker
