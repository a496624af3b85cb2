"""Client for the hosted authentication service.

Credentials, sessions and password-reset mail live in a GoTrue-compatible
auth server (the one bundled with hosted Postgres platforms). This module
only forwards calls to it; user roles are kept locally in ``profiles``.
"""

import logging
from typing import Any

import httpx

from jeevraksha.config import AUTH_ANON_KEY, AUTH_TIMEOUT_SECONDS, AUTH_URL

logger = logging.getLogger(__name__)


class AuthServiceError(Exception):
    """Raised when the auth service rejects a call or cannot be reached."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"Auth service returned {resp.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"Auth service returned {resp.status_code}"


class HostedAuthClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def _headers(self, token: str | None = None) -> dict[str, str]:
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json: dict | None = None,
        params: dict | None = None,
    ) -> dict[str, Any]:
        if not self.configured:
            raise AuthServiceError(503, "Authentication service is not configured")

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.request(
                    method, path, headers=self._headers(token), json=json, params=params
                )
        except httpx.HTTPError as e:
            logger.error("Auth service request %s %s failed: %s", method, path, e)
            raise AuthServiceError(503, "Authentication service unavailable") from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.info("Auth service rejected %s %s (%s): %s", method, path, resp.status_code, message)
            raise AuthServiceError(resp.status_code, message)

        if not resp.content:
            return {}
        return resp.json()

    async def sign_up(self, email: str, password: str, metadata: dict | None = None) -> dict:
        """Create an account. Returns the new user object."""
        data = await self._request(
            "POST", "/signup",
            json={"email": email, "password": password, "data": metadata or {}},
        )
        # Depending on email confirmation settings the user is either the body or nested
        return data.get("user", data)

    async def sign_in(self, email: str, password: str) -> dict:
        """Password login. Returns the session (access_token, user, ...)."""
        return await self._request(
            "POST", "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    async def get_user(self, token: str) -> dict:
        """Resolve an access token to its user."""
        return await self._request("GET", "/user", token=token)

    async def sign_out(self, token: str) -> None:
        await self._request("POST", "/logout", token=token)

    async def send_password_reset(self, email: str, redirect_to: str | None = None) -> None:
        params = {"redirect_to": redirect_to} if redirect_to else None
        await self._request("POST", "/recover", json={"email": email}, params=params)


_client: HostedAuthClient | None = None


def get_auth_client() -> HostedAuthClient:
    global _client
    if _client is None:
        if not AUTH_URL:
            logger.warning("AUTH_URL not set; authenticated endpoints will return 503")
        _client = HostedAuthClient(AUTH_URL, AUTH_ANON_KEY, timeout=AUTH_TIMEOUT_SECONDS)
    return _client
