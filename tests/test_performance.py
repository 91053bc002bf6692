"""Tests for performance collection and budget checks."""

from unittest.mock import AsyncMock

import pytest

from e2e_suite.errors import BudgetExceededError
from e2e_suite.models.performance_models import MIB, PerformanceBudget, PerformanceSnapshot
from e2e_suite.performance.budget_checker import assert_within_budget, check_budget
from e2e_suite.performance.monitor import PerformanceMonitor


def snapshot(url: str = "https://example.com/", **metrics) -> PerformanceSnapshot:
    values = {
        "page_load_time_ms": 1000,
        "time_to_interactive_ms": 1500,
        "total_requests": 20,
        "total_resources_size_bytes": MIB,
    }
    values.update(metrics)
    return PerformanceSnapshot(url=url, **values)


class TestCheckBudget:
    """Tests for comparing metrics against a budget."""

    def test_within_budget(self):
        """Test a fast page has no violations."""
        assert check_budget(snapshot(), PerformanceBudget()) == []

    def test_limit_is_inclusive(self):
        """Test a metric exactly at its limit passes."""
        budget = PerformanceBudget(page_load_time_ms=1000)
        assert check_budget(snapshot(page_load_time_ms=1000), budget) == []

    def test_every_violation_reported(self):
        """Test all exceeded metrics are listed."""
        violations = check_budget(
            snapshot(page_load_time_ms=4000, total_requests=75), PerformanceBudget()
        )

        assert [v.metric for v in violations] == ["page_load_time_ms", "total_requests"]
        assert str(violations[1]) == "total_requests: 75 exceeds budget 50"


class TestAssertWithinBudget:
    """Tests for budget assertions."""

    def test_budget_looked_up_from_snapshot_url(self):
        """Test the page budget comes from the snapshot URL."""
        budget = assert_within_budget(snapshot("https://example.com/search?q=a", total_requests=55))
        assert budget.total_requests == 60

    def test_exceeded_budget_raises(self):
        """Test violations raise an assertion error carrying the details."""
        with pytest.raises(BudgetExceededError) as exc_info:
            assert_within_budget(snapshot(page_load_time_ms=2500))

        assert isinstance(exc_info.value, AssertionError)
        assert exc_info.value.violations[0].metric == "page_load_time_ms"
        assert "2500 exceeds budget 2000" in str(exc_info.value)

    def test_explicit_budget(self):
        """Test an explicit budget skips the lookup."""
        with pytest.raises(BudgetExceededError):
            assert_within_budget(snapshot(), budget=PerformanceBudget(total_requests=10))


class TestPerformanceMonitor:
    """Tests for metric collection from a page."""

    @pytest.mark.asyncio
    async def test_collect(self, mock_page):
        """Test timings from the page become a snapshot."""
        mock_page.evaluate = AsyncMock(
            return_value={
                "page_load_time_ms": 850.5,
                "time_to_interactive_ms": 600.0,
                "dom_content_loaded_ms": 620.0,
                "first_paint_ms": 120.0,
                "first_contentful_paint_ms": None,
                "total_requests": 12,
                "total_resources_size_bytes": 40960,
            }
        )

        result = await PerformanceMonitor().collect(mock_page)

        assert result.url == "https://example.com/"
        assert result.page_load_time_ms == 850.5
        assert result.first_contentful_paint_ms is None
        assert result.total_requests == 12

    @pytest.mark.asyncio
    async def test_collect_propagates_errors(self, mock_page):
        """Test evaluation failures are raised to the caller."""
        mock_page.evaluate = AsyncMock(side_effect=RuntimeError("page closed"))

        with pytest.raises(RuntimeError, match="page closed"):
            await PerformanceMonitor().collect(mock_page)

    @pytest.mark.asyncio
    async def test_clear(self, mock_page):
        """Test clearing marks evaluates a script on the page."""
        await PerformanceMonitor().clear(mock_page)
        mock_page.evaluate.assert_awaited_once()
