"""
Password-grant authentication against the GetFresh token endpoint.

POSTs the account email/password as a form-encoded ``grant_type=password``
request, authenticated with the app's fixed client id (empty secret), and
returns the ``access_token`` from the JSON response.

Every failure -- network error, timeout, non-JSON body, missing or empty
``access_token`` -- is reported as :class:`InvalidCredentialsError`. There is
no retry here; the next scheduled cycle logs in again if no token is cached.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging

import httpx

from getfresh.src.const import (
    CLIENT_ID,
    CLIENT_SECRET,
    HTTP_TIMEOUT_S,
    LOGIN_HEADERS,
    TOKEN_URL,
)
from getfresh.src.errors import InvalidCredentialsError

logger = logging.getLogger(__name__)


class AuthClient:
    """Exchanges account credentials for a bearer token.

    Args:
        token_url: Token endpoint URL (defaults to the production endpoint).
        timeout_s: Request timeout in seconds.
    """

    def __init__(
        self,
        token_url: str = TOKEN_URL,
        timeout_s: float = HTTP_TIMEOUT_S,
    ) -> None:
        self._token_url = token_url
        self._timeout_s = timeout_s

    async def authenticate(self, email: str, password: str) -> str:
        """Log in with *email*/*password* and return the access token.

        Args:
            email: Account email address (sent as ``username``).
            password: Account password.

        Returns:
            A non-empty bearer token.

        Raises:
            InvalidCredentialsError: If no token could be obtained.
        """
        form = {
            "grant_type": "password",
            "username": email,
            "password": password,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                response = await client.post(
                    self._token_url,
                    data=form,
                    headers=LOGIN_HEADERS,
                    auth=(CLIENT_ID, CLIENT_SECRET),
                )
        except httpx.HTTPError as exc:
            logger.warning("Login request failed (network error): %s", exc)
            raise InvalidCredentialsError("Login request failed") from exc

        try:
            body = response.json()
        except ValueError as exc:
            logger.warning("Login failed (HTTP %d, non-JSON body)", response.status_code)
            raise InvalidCredentialsError("Login response is not JSON") from exc

        token = body.get("access_token") if isinstance(body, dict) else None
        if not token or not isinstance(token, str):
            logger.warning("Login failed (HTTP %d, no access_token)", response.status_code)
            raise InvalidCredentialsError(
                "The email address or password of your account is invalid"
            )
        return token
