"""Logging setup for test runs."""

import logging
from typing import Optional, Union

from e2e_suite.config.settings import SuiteConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

NOISY_LOGGERS = ("playwright", "asyncio")


def configure_logging(
    level: Optional[Union[int, str]] = None,
    verbose: bool = False,
    config: Optional[SuiteConfig] = None,
) -> None:
    """
    Configure root logging for a test session.

    Args:
        level: Log level; defaults to SuiteConfig.log_level (DEBUG if verbose)
        verbose: Keep third-party loggers at the same level
        config: Suite configuration to read the default level from
    """
    if level is None:
        level = logging.DEBUG if verbose else (config or SuiteConfig()).log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logging.basicConfig(level=level, format=LOG_FORMAT)

    # Suppress noisy loggers in non-verbose mode
    if not verbose:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
