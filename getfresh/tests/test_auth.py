"""
Unit tests for the password-grant auth client.

Tests verify:
- POST to the token endpoint with form body, client basic auth, and the
  login header set.
- A JSON body with access_token returns the token.
- Missing/empty access_token, non-JSON body, and network errors raise
  InvalidCredentialsError (never an empty token).
- A 10 second timeout is configured.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest
from getfresh.src.auth import AuthClient
from getfresh.src.errors import InvalidCredentialsError
from helpers import make_client, make_response

# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------


class TestLoginRequest:
    """authenticate() sends the password-grant request the service expects."""

    @pytest.mark.asyncio
    async def test_posts_password_grant_form(self) -> None:
        client = make_client(post=make_response({"access_token": "tok-1"}))

        with patch(
            "getfresh.src.auth.httpx.AsyncClient", return_value=client
        ) as mock_cls:
            await AuthClient().authenticate("user@example.com", "s3cret")

        mock_cls.assert_called_once_with(timeout=10.0)
        client.post.assert_awaited_once()
        call_args = client.post.call_args
        assert call_args.args[0] == "https://www.getfresh.energy/oauth/token"
        assert call_args.kwargs["data"] == {
            "grant_type": "password",
            "username": "user@example.com",
            "password": "s3cret",
        }
        assert call_args.kwargs["auth"] == ("fresh-webclient", "")

    @pytest.mark.asyncio
    async def test_sends_mobile_client_headers(self) -> None:
        client = make_client(post=make_response({"access_token": "tok-1"}))

        with patch("getfresh.src.auth.httpx.AsyncClient", return_value=client):
            await AuthClient().authenticate("user@example.com", "s3cret")

        headers = client.post.call_args.kwargs["headers"]
        assert headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert headers["User-Agent"] == "okhttp/3.2.0"
        assert headers["Accept-Encoding"] == "gzip"
        assert headers["Connection"] == "keep-alive"


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


class TestLoginOutcome:
    """authenticate() returns a non-empty token or raises."""

    @pytest.mark.asyncio
    async def test_returns_access_token(self) -> None:
        body = {"access_token": "abc.def", "token_type": "bearer", "expires_in": 3600}
        client = make_client(post=make_response(body))

        with patch("getfresh.src.auth.httpx.AsyncClient", return_value=client):
            token = await AuthClient().authenticate("user@example.com", "pw")

        assert token == "abc.def"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"error": "invalid_grant", "error_description": "Bad credentials"},
            {"access_token": ""},
            {"access_token": None},
            {"access_token": 12345},
            ["not", "an", "object"],
        ],
    )
    async def test_missing_or_empty_token_raises(self, body: object) -> None:
        client = make_client(post=make_response(body, status_code=400))

        with patch("getfresh.src.auth.httpx.AsyncClient", return_value=client):
            with pytest.raises(InvalidCredentialsError):
                await AuthClient().authenticate("user@example.com", "wrong")

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self) -> None:
        client = make_client(post=make_response(status_code=502, json_error=True))

        with patch("getfresh.src.auth.httpx.AsyncClient", return_value=client):
            with pytest.raises(InvalidCredentialsError):
                await AuthClient().authenticate("user@example.com", "pw")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "exc",
        [
            httpx.ConnectError("Connection refused"),
            httpx.ReadTimeout("timed out"),
        ],
    )
    async def test_network_error_raises(self, exc: Exception) -> None:
        client = make_client(post=exc)

        with patch("getfresh.src.auth.httpx.AsyncClient", return_value=client):
            with pytest.raises(InvalidCredentialsError) as exc_info:
                await AuthClient().authenticate("user@example.com", "pw")

        assert exc_info.value.__cause__ is exc
