"""Reusable mock recipes built on the mock dispatcher.

Recipes are plain response handlers (functions of ParsedRequest) plus the
rules they should be registered under. They keep their state in ordinary
Python objects owned by the test; nothing here is process-global.
"""

import copy
import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from e2e_suite.data.factories import create_api_response, create_error_response
from e2e_suite.models.mock_models import HttpMethod, MockResponse, ParsedRequest

logger = logging.getLogger(__name__)


def _positive_int(value: Optional[str], default: int) -> int:
    """Parse a query value, falling back to default for missing or < 1 values."""
    try:
        parsed = int(value) if value is not None else 0
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 1 else default


def paginate(all_data: List[Any], default_limit: int = 10):
    """Create a handler serving ``all_data`` one page at a time.

    The handler reads ``page`` (default 1) and ``limit`` (default
    ``default_limit``) from the query string and returns the slice
    ``[(page - 1) * limit, page * limit)`` in the success envelope with
    pagination metadata. Pages past the end return an empty list.

    Args:
        all_data: Complete data set
        default_limit: Page size when the request does not give one

    Returns:
        Handler function of ParsedRequest
    """

    def handler(request: ParsedRequest) -> Dict[str, Any]:
        page = _positive_int(request.query.get("page"), 1)
        limit = _positive_int(request.query.get("limit"), default_limit)
        start = (page - 1) * limit
        total = len(all_data)

        return create_api_response(
            all_data[start:start + limit],
            {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit),
            },
        )

    return handler


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_int_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _not_found() -> MockResponse:
    return MockResponse(status=404, body=create_error_response("Resource not found", 404))


class CrudResource:
    """In-memory REST resource answering list/get/create/update/delete.

    IDs are integers taken from the last path segment. Items in the initial
    data without an integer ``id`` are kept but do not seed the counter and
    cannot be addressed by id. The next ID starts at
    ``max(existing ids) + 1`` (or 1 for an empty list) and only ever grows,
    so deleted IDs are never reused.

    Example:
        users = CrudResource("users", [{"id": 1, "name": "a"}])
        await mocker.mock_crud_operations(users)
    """

    def __init__(self, resource_name: str, initial_data: Optional[List[Dict[str, Any]]] = None):
        self.resource_name = resource_name.strip("/")
        self.items: List[Dict[str, Any]] = [dict(item) for item in (initial_data or [])]
        self.next_id = max(
            (item["id"] for item in self.items if _is_int_id(item.get("id"))), default=0
        ) + 1

    @property
    def collection_pattern(self) -> str:
        return f"**/{self.resource_name}"

    @property
    def item_pattern(self) -> str:
        return f"**/{self.resource_name}/*"

    def routes(self) -> List[Dict[str, Any]]:
        """Rules to register, by-id patterns before the collection pattern.

        ``**/users`` also matches ``.../users/1`` as a substring, so the
        item rule has to win resolution for GET.
        """
        return [
            {"method": HttpMethod.GET, "url_pattern": self.item_pattern,
             "response": self.get_item, "status": 200},
            {"method": HttpMethod.GET, "url_pattern": self.collection_pattern,
             "response": self.list_items, "status": 200},
            {"method": HttpMethod.POST, "url_pattern": self.collection_pattern,
             "response": self.create_item, "status": 201},
            {"method": HttpMethod.PUT, "url_pattern": self.item_pattern,
             "response": self.update_item, "status": 200},
            {"method": HttpMethod.DELETE, "url_pattern": self.item_pattern,
             "response": self.delete_item, "status": 200,
             "headers": {"content-type": "application/json"}},
        ]

    def _item_id(self, request: ParsedRequest) -> Optional[int]:
        segments = request.path_segments
        if not segments:
            return None
        try:
            return int(segments[-1])
        except ValueError:
            return None

    def _index_of(self, item_id: Optional[int]) -> int:
        if item_id is None:
            return -1
        for index, item in enumerate(self.items):
            if item.get("id") == item_id:
                return index
        return -1

    def list_items(self, request: ParsedRequest) -> Dict[str, Any]:
        return create_api_response(list(self.items))

    def get_item(self, request: ParsedRequest) -> Any:
        index = self._index_of(self._item_id(request))
        if index == -1:
            return _not_found()
        return create_api_response(self.items[index])

    def create_item(self, request: ParsedRequest) -> Dict[str, Any]:
        body = request.json_body if isinstance(request.json_body, dict) else {}
        item = {**body, "id": self.next_id, "createdAt": _timestamp()}
        self.next_id += 1
        self.items.append(item)
        logger.debug(f"Created {self.resource_name} #{item['id']}")
        return create_api_response(item)

    def update_item(self, request: ParsedRequest) -> Any:
        index = self._index_of(self._item_id(request))
        if index == -1:
            return _not_found()
        body = request.json_body if isinstance(request.json_body, dict) else {}
        current = self.items[index]
        self.items[index] = {**current, **body, "id": current["id"], "updatedAt": _timestamp()}
        return create_api_response(self.items[index])

    def delete_item(self, request: ParsedRequest) -> Any:
        index = self._index_of(self._item_id(request))
        if index == -1:
            return _not_found()
        removed = self.items.pop(index)
        logger.debug(f"Deleted {self.resource_name} #{removed['id']}")
        return {"success": True, "message": "Resource deleted"}

    def snapshot(self) -> List[Dict[str, Any]]:
        """Deep copy of the current items."""
        return copy.deepcopy(self.items)


class AuthMock:
    """Fixed-credential authentication endpoints.

    Only the exact configured username/password pair logs in; anything else
    gets a 401 error envelope.
    """

    ACCESS_TOKEN = "mock-jwt-token-12345"
    REFRESH_TOKEN = "mock-refresh-token-67890"
    EXPIRES_IN = 3600

    def __init__(
        self,
        username: str = "test@example.com",
        password: str = "password123",
        user: Optional[Dict[str, Any]] = None,
    ):
        self.username = username
        self.password = password
        self.user = user or {
            "id": 1,
            "email": username,
            "username": username.split("@")[0],
            "role": "user",
            "isActive": True,
        }

    def routes(self) -> List[Dict[str, Any]]:
        return [
            {"method": HttpMethod.POST, "url_pattern": "/auth/login", "response": self.login},
            {"method": HttpMethod.GET, "url_pattern": "/auth/me", "response": self.me},
            {"method": HttpMethod.POST, "url_pattern": "/auth/logout", "response": self.logout},
        ]

    def login(self, request: ParsedRequest) -> Any:
        body = request.json_body if isinstance(request.json_body, dict) else {}
        if body.get("username") == self.username and body.get("password") == self.password:
            return {
                "success": True,
                "data": {
                    "access_token": self.ACCESS_TOKEN,
                    "refresh_token": self.REFRESH_TOKEN,
                    "token_type": "Bearer",
                    "expires_in": self.EXPIRES_IN,
                    "user": dict(self.user),
                },
            }
        logger.debug(f"Rejected mock login for {body.get('username')!r}")
        return MockResponse(status=401, body=create_error_response("Invalid credentials", 401))

    def me(self, request: ParsedRequest) -> Dict[str, Any]:
        return {"success": True, "data": dict(self.user)}

    def logout(self, request: ParsedRequest) -> Dict[str, Any]:
        return {"success": True, "message": "Logged out successfully"}
