"""Configuration for the e2e suite."""

from e2e_suite.config.settings import SuiteConfig
from e2e_suite.config.environments import (
    ENVIRONMENTS,
    EnvironmentConfig,
    get_current_environment,
    get_environment,
)
from e2e_suite.config.performance_budgets import (
    COMMON_BUDGETS,
    PAGE_BUDGETS,
    budgets_for_config,
    get_performance_budget,
    load_budgets,
)
from e2e_suite.config.logging_config import configure_logging

__all__ = [
    "SuiteConfig",
    "ENVIRONMENTS",
    "EnvironmentConfig",
    "get_current_environment",
    "get_environment",
    "COMMON_BUDGETS",
    "PAGE_BUDGETS",
    "budgets_for_config",
    "get_performance_budget",
    "load_budgets",
    "configure_logging",
]
