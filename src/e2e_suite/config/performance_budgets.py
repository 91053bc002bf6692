"""Performance budgets per page path.

PATTERN: Built-in defaults with YAML/JSON file overrides
CRITICAL: Longest matching path prefix wins; unmatched pages use "default"
GOTCHA: Budget files are validated on load and fail fast
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union
from urllib.parse import urlsplit

import yaml
from pydantic import ValidationError

from e2e_suite.errors import ConfigurationError
from e2e_suite.models.performance_models import MIB, PerformanceBudget

logger = logging.getLogger(__name__)

DEFAULT_KEY = "default"

COMMON_BUDGETS: Dict[str, Any] = {
    "time_to_interactive_ms": 5000,
    "total_requests": 50,
    "total_resources_size_bytes": 2 * MIB,
}

PAGE_BUDGETS: Dict[str, PerformanceBudget] = {
    "/": PerformanceBudget(**{**COMMON_BUDGETS, "page_load_time_ms": 2000}),
    # Search results pull in more requests
    "/search": PerformanceBudget(
        **{**COMMON_BUDGETS, "page_load_time_ms": 2500, "total_requests": 60}
    ),
    # Product pages carry larger images
    "/products/": PerformanceBudget(
        **{
            **COMMON_BUDGETS,
            "page_load_time_ms": 3000,
            "total_resources_size_bytes": 3 * MIB,
        }
    ),
    DEFAULT_KEY: PerformanceBudget(**{**COMMON_BUDGETS, "page_load_time_ms": 3000}),
}


def get_performance_budget(
    url: str,
    budgets: Optional[Dict[str, PerformanceBudget]] = None,
) -> PerformanceBudget:
    """
    Get the budget for a URL by its most specific matching path prefix.

    Args:
        url: Absolute URL or bare path
        budgets: Budget table (defaults to PAGE_BUDGETS)

    Returns:
        Matching PerformanceBudget, or the "default" entry
    """
    budgets = budgets if budgets is not None else PAGE_BUDGETS
    path = urlsplit(url).path or "/"

    candidates = [key for key in budgets if key != DEFAULT_KEY and path.startswith(key)]
    if candidates:
        return budgets[max(candidates, key=len)]
    return budgets.get(DEFAULT_KEY, PerformanceBudget())


def load_budgets(
    path: Union[str, Path],
    base: Optional[Dict[str, PerformanceBudget]] = None,
) -> Dict[str, PerformanceBudget]:
    """
    Load page budgets from a YAML or JSON file merged onto a base table.

    Each top-level key is a path prefix (or "default"); its mapping only
    needs the fields it overrides.

    Args:
        path: Budget file (.yaml, .yml or .json)
        base: Table to merge onto (defaults to PAGE_BUDGETS)

    Returns:
        New budget table

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = Path(path)
    base = base if base is not None else PAGE_BUDGETS

    if not path.exists():
        raise ConfigurationError(f"Performance budget file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                raw = json.load(f)
            else:
                raw = yaml.safe_load(f) or {}
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Invalid performance budget file {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Performance budget file {path} must contain a mapping")

    merged = dict(base)
    for key, overrides in raw.items():
        if not isinstance(overrides, dict):
            raise ConfigurationError(f"Budget for '{key}' must be a mapping")
        starting_point = merged.get(key, merged.get(DEFAULT_KEY, PerformanceBudget()))
        try:
            merged[key] = PerformanceBudget(**{**starting_point.model_dump(), **overrides})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid budget for '{key}': {e}") from e

    logger.info(f"Loaded {len(raw)} performance budget overrides from {path}")
    return merged


def budgets_for_config(config: Any) -> Dict[str, PerformanceBudget]:
    """Budget table for a SuiteConfig, applying its budget file if one is set."""
    if config.performance_budgets_file:
        return load_budgets(config.performance_budgets_file)
    return PAGE_BUDGETS
