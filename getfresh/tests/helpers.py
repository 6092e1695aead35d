"""
HTTP mock helpers shared by the auth, link resolver, and poller tests.

Builds ``httpx.AsyncClient`` / ``httpx.Response`` stand-ins so tests can
patch ``httpx.AsyncClient`` in the module under test.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock


def make_response(
    body: Any = None,
    status_code: int = 200,
    json_error: bool = False,
) -> MagicMock:
    """Create a mock httpx.Response.

    Args:
        body: Value returned by ``response.json()``.
        status_code: HTTP status code.
        json_error: If True, ``response.json()`` raises ValueError.
    """
    response = MagicMock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = body
    return response


def make_client(
    *,
    get: list[Any] | None = None,
    post: Any = None,
) -> AsyncMock:
    """Create a mock httpx.AsyncClient usable as an async context manager.

    Args:
        get: Side effects for successive ``client.get`` calls (responses or
            exceptions).
        post: Return value (or exception) for ``client.post``.
    """
    client = AsyncMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    client.get = AsyncMock(side_effect=get or [])
    if isinstance(post, BaseException):
        client.post = AsyncMock(side_effect=post)
    else:
        client.post = AsyncMock(return_value=post)
    return client


def discovery_document(**overrides: str) -> dict[str, Any]:
    """Return a /links discovery document with all four resources."""
    hrefs = {
        "currentReadings": "https://www.getfresh.energy/readings/current",
        "consumption": "https://www.getfresh.energy/consumption",
        "profile": "https://www.getfresh.energy/profile",
        "consumptionCurrentMonth": "https://www.getfresh.energy/consumption/month",
    }
    hrefs.update(overrides)
    return {"_links": {name: {"href": href} for name, href in hrefs.items()}}
