"""API request mocking for UI tests.

This module provides the ApiMocker class, which installs a single
Playwright route handler on a page (or browser context) and answers
intercepted requests from a registry of mock rules. Requests without a
matching rule continue to the network untouched.
"""

import asyncio
import inspect
import json
import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional, Union

from playwright.async_api import BrowserContext, Page, Request, Route

from e2e_suite.config.settings import SuiteConfig
from e2e_suite.data.factories import create_error_response
from e2e_suite.errors import SerializationError
from e2e_suite.mocking.mock_registry import MockRegistry
from e2e_suite.mocking.recipes import AuthMock, CrudResource, paginate
from e2e_suite.mocking.url_matcher import url_matches
from e2e_suite.models.mock_models import (
    HttpMethod,
    InterceptedRequest,
    MockResponse,
    MockRule,
    ParsedRequest,
    StaticResponse,
)

logger = logging.getLogger(__name__)

INTERCEPT_ALL = "**/*"
DEFAULT_WAIT_TIMEOUT_MS = 30000


class ApiMocker:
    """Mock API responses for a single page or browser context.

    This class provides functionality to:
    - Register static or per-request computed responses by method and URL pattern
    - Delay responses without blocking other intercepted requests
    - Record every mocked request for later assertions
    - Serve paginated, CRUD and authentication recipes

    Each test owns its own ApiMocker. Use it as an async context manager
    (the ``api_mocker`` fixture does this): on a clean exit any error
    recorded inside Playwright's route callbacks is re-raised, and the
    route handler is always removed.

    Example:
        async with ApiMocker(page) as mocker:
            await mocker.mock_get("**/api/users", {"users": []}, delay_ms=100)
            await page.goto(url)
            assert mocker.was_api_called("**/api/users")
    """

    def __init__(
        self,
        page: Union[Page, BrowserContext],
        default_page_limit: int = 10,
        auth_username: str = "test@example.com",
        auth_password: str = "password123",
        default_timeout_ms: float = DEFAULT_WAIT_TIMEOUT_MS,
    ):
        """Initialize the mocker.

        Args:
            page: Playwright page or browser context to intercept requests on
            default_page_limit: Page size for paginated mocks without ``limit``
            auth_username: Username accepted by ``mock_auth`` by default
            auth_password: Password accepted by ``mock_auth`` by default
            default_timeout_ms: Timeout for ``wait_for_api_call`` by default
        """
        self.page = page
        self.default_page_limit = default_page_limit
        self.auth_username = auth_username
        self.auth_password = auth_password
        self.default_timeout_ms = default_timeout_ms
        self.registry = MockRegistry()
        self.intercepted_requests: List[InterceptedRequest] = []
        self.errors: List[Exception] = []
        self._call_counts: Dict[str, int] = defaultdict(int)
        self._intercepting = False

    @classmethod
    def from_config(cls, page: Union[Page, BrowserContext], config: SuiteConfig) -> "ApiMocker":
        """Create a mocker using SuiteConfig defaults."""
        return cls(
            page,
            default_page_limit=config.mock_default_page_limit,
            auth_username=config.mock_auth_username,
            auth_password=config.mock_auth_password,
            default_timeout_ms=config.default_timeout_ms,
        )

    async def __aenter__(self) -> "ApiMocker":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            if exc_type is None:
                self.raise_for_errors()
        finally:
            await self.dispose()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def setup_interception(self) -> None:
        """Install the catch-all route handler once."""
        if self._intercepting:
            return
        await self.page.route(INTERCEPT_ALL, self.dispatch)
        self._intercepting = True
        logger.info("API mock interception installed")

    async def register(self, rule: MockRule) -> MockRule:
        """Register a prepared rule and make sure interception is active.

        Raises:
            SerializationError: If a static body cannot be encoded as JSON
        """
        if isinstance(rule.response, StaticResponse):
            self._serialize(rule.response.value, rule.method.value, rule.url_pattern)
        self.registry.register(rule)
        await self.setup_interception()
        return rule

    async def mock(
        self,
        method: Union[str, HttpMethod],
        url_pattern: str,
        response: Any = None,
        status: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
        delay_ms: int = 0,
    ) -> MockRule:
        """Mock requests for a method and URL pattern.

        Args:
            method: HTTP method to match
            url_pattern: URL pattern with ``*`` / ``**`` wildcards
            response: Static body, or a function of ParsedRequest returning
                the body (or a MockResponse)
            status: Response status (defaults per method)
            headers: Response headers (defaults per method)
            delay_ms: Artificial latency in milliseconds

        Returns:
            The registered rule

        Raises:
            MockConfigurationError: On an unknown method or negative delay
            SerializationError: If a static body cannot be encoded as JSON
        """
        rule = MockRule.build(method, url_pattern, response, status, headers, delay_ms)
        return await self.register(rule)

    async def mock_get(self, url_pattern: str, response: Any = None, **options: Any) -> MockRule:
        return await self.mock(HttpMethod.GET, url_pattern, response, **options)

    async def mock_post(self, url_pattern: str, response: Any = None, **options: Any) -> MockRule:
        return await self.mock(HttpMethod.POST, url_pattern, response, **options)

    async def mock_put(self, url_pattern: str, response: Any = None, **options: Any) -> MockRule:
        return await self.mock(HttpMethod.PUT, url_pattern, response, **options)

    async def mock_patch(self, url_pattern: str, response: Any = None, **options: Any) -> MockRule:
        return await self.mock(HttpMethod.PATCH, url_pattern, response, **options)

    async def mock_delete(self, url_pattern: str, response: Any = None, **options: Any) -> MockRule:
        return await self.mock(HttpMethod.DELETE, url_pattern, response, **options)

    async def mock_error(
        self,
        url_pattern: str,
        status_code: int,
        message: str,
        method: Union[str, HttpMethod] = HttpMethod.GET,
    ) -> MockRule:
        """Answer matching requests with an error envelope and status."""
        return await self.mock(
            method,
            url_pattern,
            create_error_response(message, status_code),
            status=status_code,
            headers={"content-type": "application/json"},
        )

    async def mock_paginated_response(
        self,
        url_pattern: str,
        all_data: List[Any],
        default_limit: Optional[int] = None,
    ) -> MockRule:
        """Serve ``all_data`` page by page from ``page``/``limit`` query parameters."""
        limit = default_limit or self.default_page_limit
        return await self.mock_get(url_pattern, paginate(all_data, limit))

    async def mock_crud_operations(
        self,
        resource: Union[str, CrudResource],
        initial_data: Optional[List[Dict[str, Any]]] = None,
    ) -> CrudResource:
        """Simulate a REST resource backed by an in-memory list.

        Args:
            resource: Resource name (e.g. ``"users"``) or a prepared CrudResource
            initial_data: Initial items when a name is given

        Returns:
            The CrudResource holding the live data
        """
        if not isinstance(resource, CrudResource):
            resource = CrudResource(resource, initial_data)
        for route in resource.routes():
            await self.mock(**route)
        logger.info(
            f"Mocked CRUD operations for '{resource.resource_name}' "
            f"({len(resource.items)} initial items)"
        )
        return resource

    async def mock_auth(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        user: Optional[Dict[str, Any]] = None,
    ) -> AuthMock:
        """Mock login, current-user and logout endpoints with fixed credentials.

        Credentials default to ``auth_username`` / ``auth_password``.
        """
        auth = AuthMock(username or self.auth_username, password or self.auth_password, user)
        for route in auth.routes():
            await self.mock(**route)
        return auth

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def resolve(self, method: str, url: str) -> Optional[MockRule]:
        return self.registry.resolve(method, url)

    async def dispatch(self, route: Route, request: Optional[Request] = None) -> None:
        """Handle one intercepted request.

        Continues the request unmodified when no rule matches; otherwise
        records it, waits for the rule's delay and fulfills it with the
        rule's response. Handler and serialization errors are recorded in
        ``errors``, the request is aborted, and the error is re-raised.

        Args:
            route: Playwright route object
            request: Playwright request object (defaults to ``route.request``)
        """
        request = request or route.request
        rule = self.registry.resolve(request.method, request.url)

        if rule is None:
            logger.debug(f"No mock for {request.method} {request.url}, continuing")
            await route.continue_()
            return

        try:
            await self._fulfill(route, request, rule)
        except Exception as e:
            self.errors.append(e)
            logger.error(f"Mock {rule.key} failed for {request.url}: {e}")
            try:
                await route.abort("failed")
            except Exception as abort_error:
                logger.warning(f"Could not abort {request.url}: {abort_error}")
            raise

    async def _fulfill(self, route: Route, request: Request, rule: MockRule) -> None:
        self.intercepted_requests.append(
            InterceptedRequest(method=request.method, url=request.url, rule_key=rule.key)
        )
        self._call_counts[rule.key] += 1
        logger.debug(
            f"Intercepted {request.method} {request.url} "
            f"(mock: {rule.key}, call {self._call_counts[rule.key]})"
        )

        if rule.delay_ms > 0:
            logger.debug(f"Delaying response for {request.url} by {rule.delay_ms}ms")
            await asyncio.sleep(rule.delay_ms / 1000.0)

        result = rule.response.render(ParsedRequest.from_playwright(request))
        if inspect.isawaitable(result):
            result = await result

        status, headers, body = rule.status, rule.headers, result
        if isinstance(result, MockResponse):
            status = result.status
            body = result.body
            if result.headers is not None:
                headers = result.headers

        await route.fulfill(
            status=status,
            headers=headers,
            body=self._serialize(body, request.method, request.url),
        )
        logger.debug(f"Fulfilled {request.url} with status {status}")

    def _serialize(self, body: Any, method: str, url: str) -> str:
        try:
            return json.dumps(body)
        except (TypeError, ValueError) as e:
            raise SerializationError(
                f"Response body for {method} {url} is not JSON serializable: {e}",
                method=method,
                url=url,
            ) from e

    def raise_for_errors(self) -> None:
        """Re-raise the first error recorded while dispatching, if any."""
        if self.errors:
            raise self.errors[0]

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def get_intercepted_requests(
        self,
        url_pattern: Optional[str] = None,
        method: Optional[Union[str, HttpMethod]] = None,
    ) -> List[InterceptedRequest]:
        """Get mocked requests with optional filtering.

        Args:
            url_pattern: Optional URL pattern to filter by
            method: Optional HTTP method to filter by

        Returns:
            Matching records in capture order
        """
        requests = list(self.intercepted_requests)
        if method:
            wanted = HttpMethod.parse(method).value
            requests = [r for r in requests if r.method == wanted]
        if url_pattern is not None:
            requests = [r for r in requests if url_matches(r.url, url_pattern)]
        return requests

    def was_api_called(
        self, url_pattern: str, method: Union[str, HttpMethod] = HttpMethod.GET
    ) -> bool:
        return bool(self.get_intercepted_requests(url_pattern, method))

    async def wait_for_api_call(
        self,
        url_pattern: str,
        method: Union[str, HttpMethod] = HttpMethod.GET,
        timeout: Optional[float] = None,
    ) -> Optional[InterceptedRequest]:
        """Wait until a mocked request matching the pattern is recorded.

        Args:
            url_pattern: URL pattern to wait for
            method: HTTP method to wait for
            timeout: Timeout in milliseconds (defaults to ``default_timeout_ms``)

        Returns:
            The first matching record, or None on timeout
        """
        if timeout is None:
            timeout = self.default_timeout_ms
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout / 1000.0

        while True:
            matches = self.get_intercepted_requests(url_pattern, method)
            if matches:
                return matches[0]
            if loop.time() >= deadline:
                break
            await asyncio.sleep(0.1)

        logger.warning(f"Timeout waiting for {method} {url_pattern} after {timeout}ms")
        return None

    def get_mock_stats(self) -> Dict[str, int]:
        """Get how many times each rule answered a request.

        Returns:
            Dictionary mapping rule key to call count, e.g.
            ``{"GET:**/api/users": 5}``
        """
        return dict(self._call_counts)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def clear_mocks(self) -> None:
        """Remove all rules and forget recorded requests and errors."""
        logger.info(f"Clearing {len(self.registry)} API mocks")
        self.registry.clear()
        self.intercepted_requests.clear()
        self.errors.clear()
        self._call_counts.clear()

    async def dispose(self) -> None:
        """Clear all mocks and remove the route handler from the page."""
        self.clear_mocks()
        if self._intercepting:
            await self.page.unroute(INTERCEPT_ALL, self.dispatch)
            self._intercepting = False
