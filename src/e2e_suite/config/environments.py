"""Named target environments for test runs."""

import logging
import os
from typing import Dict, Optional

from pydantic import BaseModel, Field

from e2e_suite.errors import ConfigurationError

logger = logging.getLogger(__name__)


class EnvironmentConfig(BaseModel):
    """Endpoints and run settings for one environment."""

    name: str = Field(description="Environment name")
    base_url: str = Field(description="Web application URL")
    api_url: str = Field(description="Backend API URL")
    timeout_ms: int = Field(default=30000, description="Test timeout")
    retries: int = Field(default=1, description="Test-level retries")


ENVIRONMENTS: Dict[str, EnvironmentConfig] = {
    "dev": EnvironmentConfig(
        name="dev",
        base_url="https://dev.example.com",
        api_url="https://api-dev.example.com",
        timeout_ms=30000,
        retries=1,
    ),
    "staging": EnvironmentConfig(
        name="staging",
        base_url="https://staging.example.com",
        api_url="https://api-staging.example.com",
        timeout_ms=30000,
        retries=2,
    ),
    "prod": EnvironmentConfig(
        name="prod",
        base_url="https://example.com",
        api_url="https://api.example.com",
        timeout_ms=60000,
        retries=3,
    ),
}


def get_environment(name: str = "dev") -> EnvironmentConfig:
    """
    Get an environment profile by name (case insensitive).

    Raises:
        ConfigurationError: If the environment is unknown
    """
    environment = ENVIRONMENTS.get(name.lower())
    if environment is None:
        raise ConfigurationError(
            f"Environment '{name}' not found. "
            f"Available environments: {', '.join(ENVIRONMENTS)}"
        )
    return environment


def get_current_environment(name: Optional[str] = None) -> EnvironmentConfig:
    """Resolve the environment from the argument, TEST_ENV, ENV, then 'dev'."""
    env = name or os.getenv("TEST_ENV") or os.getenv("ENV") or "dev"
    environment = get_environment(env)
    logger.debug(f"Using environment '{environment.name}' ({environment.base_url})")
    return environment
