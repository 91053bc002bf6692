"""Shared fixtures: fake Playwright routes, requests and pages."""

import json
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import pytest

from e2e_suite.mocking.api_mocker import ApiMocker

pytest_plugins = ["pytester"]


class FakeRequest:
    """Stand-in for playwright.async_api.Request."""

    def __init__(
        self,
        method: str,
        url: str,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.method = method.upper()
        self.url = url
        self.headers = headers or {}
        if body is None or isinstance(body, str):
            self.post_data = body
        else:
            self.post_data = json.dumps(body)


class Exchange:
    """One dispatched request and what the mocker did with it."""

    def __init__(self, request: FakeRequest, route: AsyncMock):
        self.request = request
        self.route = route

    @property
    def continued(self) -> bool:
        return self.route.continue_.await_count == 1

    @property
    def fulfilled(self) -> bool:
        return self.route.fulfill.await_count == 1

    @property
    def status(self) -> int:
        return self.route.fulfill.call_args.kwargs["status"]

    @property
    def headers(self) -> Dict[str, str]:
        return self.route.fulfill.call_args.kwargs["headers"]

    @property
    def body(self) -> str:
        return self.route.fulfill.call_args.kwargs["body"]

    @property
    def json(self) -> Any:
        return json.loads(self.body)


def make_route(request: FakeRequest) -> AsyncMock:
    route = AsyncMock()
    route.request = request
    return route


@pytest.fixture
def mock_page():
    """Create a mock Page instance."""
    page = AsyncMock()
    page.route = AsyncMock()
    page.unroute = AsyncMock()
    page.evaluate = AsyncMock()
    page.url = "https://example.com/"
    return page


@pytest.fixture
def mocker_api(mock_page):
    """ApiMocker bound to a mock page."""
    return ApiMocker(mock_page)


@pytest.fixture
def send(mocker_api):
    """Dispatch a fake request through the mocker and return the exchange."""

    async def _send(method: str, url: str, body: Any = None, headers=None) -> Exchange:
        request = FakeRequest(method, url, body, headers)
        route = make_route(request)
        await mocker_api.dispatch(route, request)
        return Exchange(request, route)

    return _send


@pytest.fixture
def fake_request():
    return FakeRequest


class RecordingSleep:
    """Fake asyncio.sleep recording requested delays in milliseconds."""

    def __init__(self):
        self.delays_ms = []

    async def __call__(self, seconds: float) -> None:
        self.delays_ms.append(seconds * 1000.0)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()
