"""Performance metric collection and budget assertions."""

from e2e_suite.performance.monitor import PerformanceMonitor
from e2e_suite.performance.budget_checker import assert_within_budget, check_budget

__all__ = ["PerformanceMonitor", "assert_within_budget", "check_budget"]
