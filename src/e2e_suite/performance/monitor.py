"""Performance metric collection for budget checks.

This module provides the PerformanceMonitor class, which reads navigation,
paint and resource timing from the page's Performance API.
"""

import logging
from typing import Any, Dict

from playwright.async_api import Page

from e2e_suite.models.performance_models import PerformanceSnapshot

logger = logging.getLogger(__name__)

COLLECT_TIMINGS_JS = """
() => {
    const nav = performance.getEntriesByType('navigation')[0];
    const paints = performance.getEntriesByType('paint');
    const resources = performance.getEntriesByType('resource');
    const paint = (name) => {
        const entry = paints.find(p => p.name === name);
        return entry ? entry.startTime : null;
    };
    return {
        page_load_time_ms: nav ? nav.loadEventEnd - nav.startTime : 0,
        time_to_interactive_ms: nav ? nav.domInteractive - nav.startTime : 0,
        dom_content_loaded_ms: nav ? nav.domContentLoadedEventEnd - nav.startTime : 0,
        first_paint_ms: paint('first-paint'),
        first_contentful_paint_ms: paint('first-contentful-paint'),
        total_requests: resources.length,
        total_resources_size_bytes: resources.reduce(
            (total, r) => total + (r.transferSize || 0), 0
        )
    };
}
"""


class PerformanceMonitor:
    """Collect page-load metrics from a Playwright page.

    PATTERN: Use the Performance API via page.evaluate() so the numbers are
    what the browser itself measured.

    Example:
        monitor = PerformanceMonitor()
        await page.goto(url, wait_until="load")
        snapshot = await monitor.collect(page)
        assert_within_budget(snapshot)
    """

    async def clear(self, page: Page) -> None:
        """Clear marks and measures before a new measurement."""
        await page.evaluate(
            "() => { performance.clearMarks(); performance.clearMeasures(); }"
        )

    async def collect(self, page: Page) -> PerformanceSnapshot:
        """Collect timing metrics for the page's current document.

        Args:
            page: Playwright page instance

        Returns:
            PerformanceSnapshot for ``page.url``

        Raises:
            Exception: If evaluation in the page fails
        """
        url = page.url
        logger.info(f"Collecting performance metrics for: {url}")

        try:
            timings: Dict[str, Any] = await page.evaluate(COLLECT_TIMINGS_JS)
        except Exception as e:
            logger.error(f"Failed to collect performance metrics: {e}")
            raise

        snapshot = PerformanceSnapshot(url=url, **timings)
        logger.info(
            f"Metrics collected - load: {snapshot.page_load_time_ms:.0f}ms, "
            f"TTI: {snapshot.time_to_interactive_ms:.0f}ms, "
            f"requests: {snapshot.total_requests}, "
            f"size: {snapshot.total_resources_size_bytes / 1024:.1f} KB"
        )
        return snapshot
