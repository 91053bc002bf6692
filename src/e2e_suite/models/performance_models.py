"""Performance budget and measurement models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

MIB = 1024 * 1024


class PerformanceBudget(BaseModel):
    """Upper bounds a page load must stay within."""

    page_load_time_ms: float = Field(default=3000, description="Load event end")
    time_to_interactive_ms: float = Field(default=5000, description="DOM interactive")
    total_requests: int = Field(default=50, description="Number of resource requests")
    total_resources_size_bytes: int = Field(
        default=2 * MIB, description="Transferred bytes across all resources"
    )


class PerformanceSnapshot(BaseModel):
    """Metrics collected from a loaded page."""

    url: str = Field(description="Measured page URL")
    page_load_time_ms: float = Field(default=0.0, description="Navigation start to load end")
    time_to_interactive_ms: float = Field(default=0.0, description="Navigation start to DOM interactive")
    dom_content_loaded_ms: float = Field(default=0.0, description="DOMContentLoaded event end")
    first_paint_ms: Optional[float] = Field(default=None, description="First paint")
    first_contentful_paint_ms: Optional[float] = Field(
        default=None, description="First contentful paint"
    )
    total_requests: int = Field(default=0, description="Resource entries")
    total_resources_size_bytes: int = Field(default=0, description="Sum of transfer sizes")
    timestamp: datetime = Field(default_factory=datetime.now, description="Collection time")


class BudgetViolation(BaseModel):
    """A single metric over its budget."""

    metric: str = Field(description="Budget field name")
    actual: float = Field(description="Measured value")
    limit: float = Field(description="Budget value")

    def __str__(self) -> str:
        return f"{self.metric}: {self.actual:g} exceeds budget {self.limit:g}"
