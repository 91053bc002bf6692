"""Tests for configuration, environments, budgets and logging setup."""

import json
import logging

import pytest

from e2e_suite.config.environments import get_current_environment, get_environment
from e2e_suite.config.logging_config import configure_logging
from e2e_suite.config.performance_budgets import (
    PAGE_BUDGETS,
    budgets_for_config,
    get_performance_budget,
    load_budgets,
)
from e2e_suite.config.settings import SuiteConfig
from e2e_suite.errors import ConfigurationError
from e2e_suite.models.retry_models import RetryPolicy


class TestSuiteConfig:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test defaults when no variables are set."""
        for name in ("TEST_ENV", "ENV", "E2E_RETRY_MAX_RETRIES", "E2E_MOCK_PAGE_LIMIT"):
            monkeypatch.delenv(name, raising=False)

        config = SuiteConfig()

        assert config.test_env == "dev"
        assert config.retry_max_retries == 3
        assert config.mock_default_page_limit == 10

    def test_environment_overrides(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("TEST_ENV", "staging")
        monkeypatch.setenv("E2E_RETRY_MAX_RETRIES", "5")
        monkeypatch.setenv("E2E_RETRY_INITIAL_DELAY_MS", "200")
        monkeypatch.setenv("E2E_RETRY_MAX_DELAY_MS", "800")

        config = SuiteConfig()
        policy = RetryPolicy.from_config(config, description="login")

        assert config.test_env == "staging"
        assert policy.max_retries == 5
        assert policy.initial_delay_ms == 200
        assert policy.max_delay_ms == 800
        assert policy.description == "login"


class TestEnvironments:
    """Tests for environment profiles."""

    def test_lookup_is_case_insensitive(self):
        """Test environment names ignore case."""
        assert get_environment("PROD").base_url == "https://example.com"

    def test_unknown_environment(self):
        """Test unknown names list the available environments."""
        with pytest.raises(ConfigurationError, match="dev, staging, prod"):
            get_environment("qa")

    def test_current_environment_from_variable(self, monkeypatch):
        """Test TEST_ENV selects the environment."""
        monkeypatch.setenv("TEST_ENV", "staging")
        assert get_current_environment().retries == 2

    def test_current_environment_default(self, monkeypatch):
        """Test dev is used when nothing is set."""
        monkeypatch.delenv("TEST_ENV", raising=False)
        monkeypatch.delenv("ENV", raising=False)
        assert get_current_environment().name == "dev"


class TestPerformanceBudgets:
    """Tests for budget lookup and overrides."""

    @pytest.mark.parametrize(
        "url,load_time",
        [
            ("https://example.com/", 2000),
            ("https://example.com/search?q=shoes", 2500),
            ("https://example.com/products/42", 3000),
            ("https://example.com/about", 2000),
        ],
    )
    def test_longest_prefix_wins(self, url, load_time):
        """Test the most specific prefix budget applies."""
        assert get_performance_budget(url).page_load_time_ms == load_time

    def test_search_allows_more_requests(self):
        """Test page-specific fields override the common budget."""
        assert get_performance_budget("https://example.com/search").total_requests == 60
        assert get_performance_budget("https://example.com/").total_requests == 50

    def test_default_when_no_prefix_matches(self):
        """Test the default budget applies without a matching prefix."""
        budgets = {"/shop": PAGE_BUDGETS["/search"], "default": PAGE_BUDGETS["default"]}
        assert get_performance_budget("https://x/blog", budgets) == PAGE_BUDGETS["default"]

    def test_load_yaml_overrides(self, tmp_path):
        """Test YAML files override and add budgets."""
        path = tmp_path / "budgets.yaml"
        path.write_text(
            "/search:\n  page_load_time_ms: 1800\n/checkout:\n  total_requests: 80\n"
        )

        budgets = load_budgets(path)

        assert budgets["/search"].page_load_time_ms == 1800
        assert budgets["/search"].total_requests == 60
        assert budgets["/checkout"].total_requests == 80
        assert get_performance_budget("https://x/checkout/pay", budgets).total_requests == 80
        assert PAGE_BUDGETS["/search"].page_load_time_ms == 2500

    def test_load_json_overrides(self, tmp_path):
        """Test JSON budget files are supported."""
        path = tmp_path / "budgets.json"
        path.write_text(json.dumps({"default": {"page_load_time_ms": 4000}}))

        assert load_budgets(path)["default"].page_load_time_ms == 4000

    def test_budgets_for_config_without_file(self, monkeypatch):
        """Test the built-in table is used when no budget file is configured."""
        monkeypatch.delenv("E2E_PERFORMANCE_BUDGETS", raising=False)
        assert budgets_for_config(SuiteConfig()) is PAGE_BUDGETS

    def test_budgets_for_config_with_file(self, tmp_path, monkeypatch):
        """Test E2E_PERFORMANCE_BUDGETS points at an override file."""
        path = tmp_path / "budgets.yaml"
        path.write_text("/:\n  page_load_time_ms: 1500\n")
        monkeypatch.setenv("E2E_PERFORMANCE_BUDGETS", str(path))

        budgets = budgets_for_config(SuiteConfig())

        assert budgets["/"].page_load_time_ms == 1500
        assert budgets["/search"] == PAGE_BUDGETS["/search"]

    def test_missing_file(self, tmp_path):
        """Test a missing file is a configuration error."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_budgets(tmp_path / "nope.yaml")

    @pytest.mark.parametrize(
        "content",
        ["- just\n- a list\n", "/x: 5\n", "/x:\n  total_requests: lots\n", "/x: [unclosed\n"],
    )
    def test_malformed_files(self, tmp_path, content):
        """Test malformed budget files fail fast."""
        path = tmp_path / "budgets.yml"
        path.write_text(content)

        with pytest.raises(ConfigurationError):
            load_budgets(path)


class TestLoggingConfig:
    """Tests for logging setup."""

    def test_noisy_loggers_clamped(self):
        """Test third-party loggers are raised to WARNING when not verbose."""
        configure_logging(level="DEBUG")
        assert logging.getLogger("playwright").level == logging.WARNING

    def test_level_from_config(self, monkeypatch, mocker):
        """Test the default level comes from SuiteConfig."""
        monkeypatch.setenv("E2E_LOG_LEVEL", "error")
        basic_config = mocker.patch("logging.basicConfig")

        configure_logging()

        assert basic_config.call_args.kwargs["level"] == logging.ERROR
