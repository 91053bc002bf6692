"""Data models for API request mocking.

This module defines the Pydantic models used by the mock registry and the
interception dispatcher: HTTP methods with their default status codes, the
parsed view of an intercepted request, the tagged response sources and the
mock rule itself.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional, Union
from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel, Field

from e2e_suite.errors import MockConfigurationError


class HttpMethod(str, Enum):
    """HTTP methods that can be mocked."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, value: Union[str, "HttpMethod"]) -> "HttpMethod":
        """Coerce a method name (any case) into an HttpMethod."""
        if isinstance(value, HttpMethod):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise MockConfigurationError(
                f"Unsupported HTTP method '{value}'. "
                f"Supported: {', '.join(m.value for m in cls)}"
            )


JSON_HEADERS: Dict[str, str] = {"content-type": "application/json"}

DEFAULT_STATUS: Dict[HttpMethod, int] = {
    HttpMethod.GET: 200,
    HttpMethod.POST: 201,
    HttpMethod.PUT: 200,
    HttpMethod.PATCH: 200,
    HttpMethod.DELETE: 204,
    HttpMethod.HEAD: 200,
    HttpMethod.OPTIONS: 200,
}


def default_headers(method: HttpMethod) -> Dict[str, str]:
    """Default response headers for a method (DELETE responses carry none)."""
    if method == HttpMethod.DELETE:
        return {}
    return dict(JSON_HEADERS)


class ParsedRequest(BaseModel):
    """Intercepted request as seen by response handlers."""

    method: str = Field(description="HTTP method (upper case)")
    url: str = Field(description="Full request URL")
    headers: Dict[str, str] = Field(default_factory=dict, description="Request headers")
    query: Dict[str, str] = Field(
        default_factory=dict, description="Query parameters (first value wins)"
    )
    body: Optional[str] = Field(default=None, description="Raw request body")
    json_body: Optional[Any] = Field(
        default=None, description="Parsed JSON body, if any"
    )

    @property
    def path(self) -> str:
        return urlsplit(self.url).path

    @property
    def path_segments(self) -> List[str]:
        return [segment for segment in self.path.split("/") if segment]

    @classmethod
    def from_url(
        cls,
        method: str,
        url: str,
        body: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> "ParsedRequest":
        """Build a parsed request from raw parts.

        Args:
            method: HTTP method
            url: Request URL including query string
            body: Raw request body, JSON-decoded when possible
            headers: Request headers

        Returns:
            ParsedRequest instance
        """
        query = {
            key: values[0]
            for key, values in parse_qs(urlsplit(url).query, keep_blank_values=True).items()
        }

        json_body = None
        if body:
            try:
                json_body = json.loads(body)
            except ValueError:
                json_body = None

        return cls(
            method=method.upper(),
            url=url,
            headers=dict(headers or {}),
            query=query,
            body=body,
            json_body=json_body,
        )

    @classmethod
    def from_playwright(cls, request: Any) -> "ParsedRequest":
        """Build a parsed request from a Playwright Request object."""
        return cls.from_url(
            method=request.method,
            url=request.url,
            body=request.post_data,
            headers=dict(request.headers),
        )


class MockResponse(BaseModel):
    """Per-request override a computed handler may return.

    Lets a single handler answer with different status codes, e.g. 404 for
    a missing item and 200 otherwise.
    """

    status: int = Field(description="Response status code")
    body: Optional[Any] = Field(default=None, description="Response body")
    headers: Optional[Dict[str, str]] = Field(
        default=None, description="Headers replacing the rule's headers"
    )


class StaticResponse(BaseModel):
    """Response source that always returns the same value."""

    kind: Literal["static"] = "static"
    value: Optional[Any] = Field(default=None, description="Body returned as-is")

    def render(self, request: ParsedRequest) -> Any:
        return self.value


class ComputedResponse(BaseModel):
    """Response source computed per request by a handler function."""

    kind: Literal["computed"] = "computed"
    handler: Callable[[ParsedRequest], Any] = Field(
        description="Function of the parsed request returning the body"
    )

    def render(self, request: ParsedRequest) -> Any:
        return self.handler(request)


ResponseSource = Union[StaticResponse, ComputedResponse]


def as_response_source(value: Any) -> ResponseSource:
    """Wrap a raw value or handler function into a tagged response source."""
    if isinstance(value, (StaticResponse, ComputedResponse)):
        return value
    if callable(value):
        return ComputedResponse(handler=value)
    return StaticResponse(value=value)


class MockRule(BaseModel):
    """A registered method + URL pattern mock."""

    method: HttpMethod = Field(description="HTTP method to match exactly")
    url_pattern: str = Field(description="URL pattern with * and ** wildcards")
    response: ResponseSource = Field(
        discriminator="kind", description="Static value or per-request handler"
    )
    status: int = Field(description="Response status code")
    headers: Dict[str, str] = Field(default_factory=dict, description="Response headers")
    delay_ms: int = Field(default=0, ge=0, description="Artificial latency before fulfilling")

    @property
    def key(self) -> str:
        return f"{self.method.value}:{self.url_pattern}"

    @classmethod
    def build(
        cls,
        method: Union[str, HttpMethod],
        url_pattern: str,
        response: Any = None,
        status: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
        delay_ms: int = 0,
    ) -> "MockRule":
        """Create a rule, filling in per-method status and header defaults.

        Args:
            method: HTTP method
            url_pattern: URL pattern to match
            response: Static body or handler function of ParsedRequest
            status: Response status (defaults per method)
            headers: Response headers (defaults per method)
            delay_ms: Artificial latency in milliseconds

        Returns:
            MockRule instance

        Raises:
            MockConfigurationError: If the method is unknown or delay is negative
        """
        http_method = HttpMethod.parse(method)
        if delay_ms is None or delay_ms < 0:
            raise MockConfigurationError(
                f"delay_ms must be a non-negative integer, got {delay_ms!r}"
            )

        return cls(
            method=http_method,
            url_pattern=url_pattern,
            response=as_response_source(response),
            status=status if status is not None else DEFAULT_STATUS[http_method],
            headers=dict(headers) if headers is not None else default_headers(http_method),
            delay_ms=delay_ms,
        )


class InterceptedRequest(BaseModel):
    """Record of a request answered by a mock rule."""

    method: str = Field(description="HTTP method")
    url: str = Field(description="Request URL")
    timestamp: datetime = Field(
        default_factory=datetime.now, description="Capture time"
    )
    rule_key: Optional[str] = Field(default=None, description="Key of the rule that matched")
