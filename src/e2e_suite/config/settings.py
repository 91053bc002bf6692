"""Suite configuration with environment variable loading."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()


class SuiteConfig(BaseModel):
    """Configuration for the e2e test suite helpers."""

    # Environment
    test_env: str = Field(
        default_factory=lambda: os.getenv("TEST_ENV", os.getenv("ENV", "dev")),
        description="Target environment profile",
    )
    log_level: str = Field(
        default_factory=lambda: os.getenv("E2E_LOG_LEVEL", "INFO"),
        description="Root log level for test runs",
    )
    default_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("E2E_DEFAULT_TIMEOUT_MS", "30000")),
        description="Default wait for mocked API calls",
    )

    # Retry Configuration
    retry_max_retries: int = Field(
        default_factory=lambda: int(os.getenv("E2E_RETRY_MAX_RETRIES", "3")),
        description="Retries after the first attempt",
    )
    retry_initial_delay_ms: int = Field(
        default_factory=lambda: int(os.getenv("E2E_RETRY_INITIAL_DELAY_MS", "1000")),
        description="First backoff delay",
    )
    retry_max_delay_ms: int = Field(
        default_factory=lambda: int(os.getenv("E2E_RETRY_MAX_DELAY_MS", "10000")),
        description="Backoff delay cap",
    )
    retry_jitter_ms: int = Field(
        default_factory=lambda: int(os.getenv("E2E_RETRY_JITTER_MS", "1000")),
        description="Upper bound of random jitter",
    )

    # Mock Configuration
    mock_default_page_limit: int = Field(
        default_factory=lambda: int(os.getenv("E2E_MOCK_PAGE_LIMIT", "10")),
        description="Page size for paginated mocks",
    )
    mock_auth_username: str = Field(
        default_factory=lambda: os.getenv("E2E_MOCK_AUTH_USERNAME", "test@example.com"),
        description="Username accepted by the auth mock",
    )
    mock_auth_password: str = Field(
        default_factory=lambda: os.getenv("E2E_MOCK_AUTH_PASSWORD", "password123"),
        description="Password accepted by the auth mock",
    )

    # Performance Configuration
    performance_budgets_file: Optional[str] = Field(
        default_factory=lambda: os.getenv("E2E_PERFORMANCE_BUDGETS"),
        description="YAML/JSON file overriding page budgets",
    )

    class Config:
        """Pydantic config."""

        env_file = ".env"
        env_file_encoding = "utf-8"
