"""Authentication helper for API-level test setup.

This module provides the AuthManager class, which logs users in through
Playwright's APIRequestContext and keeps their tokens so tests can build
authenticated request contexts.
"""

import logging
from typing import Any, Dict, Optional

from playwright.async_api import APIRequest, APIRequestContext, APIResponse

from e2e_suite.errors import AuthenticationError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEYS = ("access_token", "token", "accessToken")
REFRESH_TOKEN_KEYS = ("refresh_token", "refreshToken")
OAUTH_CLIENT_KEY = "oauth_client"


def _find_token(payload: Any, keys) -> Optional[str]:
    """Look for a token at the top level, then under ``data``."""
    if not isinstance(payload, dict):
        return None
    for key in keys:
        if payload.get(key):
            return payload[key]
    nested = payload.get("data")
    if isinstance(nested, dict):
        for key in keys:
            if nested.get(key):
                return nested[key]
    return None


class AuthManager:
    """Log users in and hand out authenticated request contexts.

    Example:
        async with async_playwright() as p:
            auth = AuthManager("https://api-dev.example.com", p.request)
            await auth.login("test@example.com", "password123")
            context = await auth.create_authenticated_context("test@example.com")
    """

    def __init__(self, base_url: str, request: APIRequest):
        """Initialize the manager.

        Args:
            base_url: API base URL
            request: Playwright APIRequest (``playwright.request``)
        """
        self.base_url = base_url
        self.request = request
        self.tokens: Dict[str, str] = {}
        self.refresh_tokens: Dict[str, str] = {}

    async def _new_context(self, **options: Any) -> APIRequestContext:
        return await self.request.new_context(base_url=self.base_url, **options)

    async def _read_json(self, response: APIResponse, action: str) -> Any:
        if not response.ok:
            raise AuthenticationError(
                f"{action} failed: {response.status} {await response.text()}",
                status=response.status,
            )
        return await response.json()

    async def login(self, username: str, password: str, login_endpoint: str = "/auth/login") -> str:
        """Log in with username/password and store the tokens.

        Args:
            username: Username or email
            password: Password
            login_endpoint: Login endpoint path

        Returns:
            Access token

        Raises:
            AuthenticationError: If the request fails or returns no token
        """
        context = await self._new_context()
        try:
            response = await context.post(
                login_endpoint, data={"username": username, "password": password}
            )
            auth_data = await self._read_json(response, "Login")
        finally:
            await context.dispose()

        token = _find_token(auth_data, ACCESS_TOKEN_KEYS)
        if not token:
            raise AuthenticationError("No access token received from login response")

        self.tokens[username] = token
        refresh_token = _find_token(auth_data, REFRESH_TOKEN_KEYS)
        if refresh_token:
            self.refresh_tokens[username] = refresh_token

        logger.info(f"Logged in as {username}")
        return token

    async def login_oauth2(
        self,
        client_id: str,
        client_secret: str,
        scope: str = "read write",
        token_endpoint: str = "/oauth/token",
    ) -> str:
        """Obtain a client-credentials token, stored under ``"oauth_client"``."""
        context = await self._new_context()
        try:
            response = await context.post(
                token_endpoint,
                form={
                    "grant_type": "client_credentials",
                    "client_id": client_id,
                    "client_secret": client_secret,
                    "scope": scope,
                },
            )
            auth_data = await self._read_json(response, "OAuth login")
        finally:
            await context.dispose()

        token = _find_token(auth_data, ("access_token",))
        if not token:
            raise AuthenticationError("No access token received from OAuth response")

        self.tokens[OAUTH_CLIENT_KEY] = token
        return token

    async def refresh_token(self, username: str, refresh_endpoint: str = "/auth/refresh") -> str:
        """Exchange the stored refresh token for a new access token."""
        refresh_token = self.refresh_tokens.get(username)
        if not refresh_token:
            raise AuthenticationError(f"No refresh token found for user: {username}")

        context = await self._new_context()
        try:
            response = await context.post(refresh_endpoint, data={"refresh_token": refresh_token})
            auth_data = await self._read_json(response, "Token refresh")
        finally:
            await context.dispose()

        token = _find_token(auth_data, ("access_token", "token"))
        if not token:
            raise AuthenticationError("No access token received from refresh response")

        self.tokens[username] = token
        logger.debug(f"Refreshed token for {username}")
        return token

    def get_token(self, username: str) -> Optional[str]:
        return self.tokens.get(username)

    def is_authenticated(self, username: str) -> bool:
        return username in self.tokens

    async def create_authenticated_context(
        self,
        username: str,
        headers: Optional[Dict[str, str]] = None,
        **options: Any,
    ) -> APIRequestContext:
        """Create a request context sending the user's bearer token.

        The caller owns the context and must dispose it.

        Raises:
            AuthenticationError: If the user has not logged in
        """
        token = self.get_token(username)
        if not token:
            raise AuthenticationError(f"No token found for user: {username}. Please login first.")

        return await self._new_context(
            extra_http_headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
                **(headers or {}),
            },
            **options,
        )

    async def logout(self, username: str, logout_endpoint: str = "/auth/logout") -> None:
        """Log out and forget the user's tokens, even if the request fails."""
        if not self.get_token(username):
            return

        try:
            context = await self.create_authenticated_context(username)
            try:
                await context.post(logout_endpoint)
            finally:
                await context.dispose()
        except Exception as e:
            logger.warning(f"Logout request failed for {username}: {e}")
        finally:
            self.tokens.pop(username, None)
            self.refresh_tokens.pop(username, None)

    def clear_all_tokens(self) -> None:
        self.tokens.clear()
        self.refresh_tokens.clear()

    async def validate_token(self, username: str, test_endpoint: str = "/auth/me") -> bool:
        """Check the stored token against an authenticated endpoint."""
        if not self.get_token(username):
            return False

        context = await self.create_authenticated_context(username)
        try:
            response = await context.get(test_endpoint)
            return response.ok
        finally:
            await context.dispose()

    async def get_user_info(self, username: str, user_endpoint: str = "/auth/me") -> Any:
        """Fetch the current user's profile with the stored token."""
        context = await self.create_authenticated_context(username)
        try:
            response = await context.get(user_endpoint)
            return await self._read_json(response, "Fetching user info")
        finally:
            await context.dispose()
