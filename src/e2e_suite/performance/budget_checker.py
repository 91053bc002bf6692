"""Compare collected performance metrics against budgets."""

import logging
from typing import Dict, List, Optional

from e2e_suite.config.performance_budgets import get_performance_budget
from e2e_suite.errors import BudgetExceededError
from e2e_suite.models.performance_models import (
    BudgetViolation,
    PerformanceBudget,
    PerformanceSnapshot,
)

logger = logging.getLogger(__name__)

BUDGETED_METRICS = (
    "page_load_time_ms",
    "time_to_interactive_ms",
    "total_requests",
    "total_resources_size_bytes",
)


def check_budget(snapshot: PerformanceSnapshot, budget: PerformanceBudget) -> List[BudgetViolation]:
    """
    List every metric that exceeds its budget.

    A metric exactly at its limit passes.
    """
    violations = []
    for metric in BUDGETED_METRICS:
        actual = getattr(snapshot, metric)
        limit = getattr(budget, metric)
        if actual > limit:
            violations.append(BudgetViolation(metric=metric, actual=actual, limit=limit))
    return violations


def assert_within_budget(
    snapshot: PerformanceSnapshot,
    url: Optional[str] = None,
    budget: Optional[PerformanceBudget] = None,
    budgets: Optional[Dict[str, PerformanceBudget]] = None,
) -> PerformanceBudget:
    """
    Assert a snapshot stays within its page budget.

    Args:
        snapshot: Collected metrics
        url: URL used to look up the budget (defaults to snapshot.url)
        budget: Explicit budget, skipping the lookup
        budgets: Budget table for the lookup

    Returns:
        The budget that was applied

    Raises:
        BudgetExceededError: Listing every violated metric
    """
    if budget is None:
        budget = get_performance_budget(url or snapshot.url, budgets)

    violations = check_budget(snapshot, budget)
    if violations:
        summary = "; ".join(str(v) for v in violations)
        logger.error(f"Performance budget exceeded for {snapshot.url}: {summary}")
        raise BudgetExceededError(
            f"Performance budget exceeded for {snapshot.url}: {summary}",
            violations=violations,
        )

    logger.debug(f"{snapshot.url} is within its performance budget")
    return budget
