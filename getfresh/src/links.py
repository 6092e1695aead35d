"""
Link-based resource discovery for the GetFresh API.

Every resource access is two requests: first the discovery document
(``/links``) is fetched with the session's bearer token and its ``_links``
objects are mapped to the four known resource names, then the resolved
``href`` is fetched and its JSON body returned.

The discovery document is deliberately not cached between calls; the
lifetime of the returned links is unknown.

Failures never raise. Network errors, non-JSON bodies, and unknown resource
names all yield an empty payload, which callers treat as "no data for this
field group". An HTTP 401/403 additionally invalidates the session token so
the next cycle logs in again.

CHANGELOG:
- 2026-10-18: Invalidate session token on 401/403
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from getfresh.src.const import API_HEADERS, HTTP_TIMEOUT_S, KNOWN_RESOURCES, LINKS_URL
from getfresh.src.models import Session

logger = logging.getLogger(__name__)

_UNAUTHORIZED = (401, 403)


def parse_links(document: Any) -> dict[str, str]:
    """Build the resource link map from a discovery document.

    Only the known resource names are kept; entries without a string
    ``href`` are skipped.

    Args:
        document: Parsed JSON of the ``/links`` response.

    Returns:
        Mapping of resource name -> absolute URL.
    """
    if not isinstance(document, dict):
        return {}
    raw_links = document.get("_links")
    if not isinstance(raw_links, dict):
        return {}

    links: dict[str, str] = {}
    for name in KNOWN_RESOURCES:
        entry = raw_links.get(name)
        if isinstance(entry, dict) and isinstance(entry.get("href"), str):
            links[name] = entry["href"]
    return links


class LinkResolver:
    """Resolves logical resource names to JSON payloads.

    Args:
        links_url: Discovery document URL (defaults to production).
        timeout_s: Per-request timeout in seconds.
    """

    def __init__(
        self,
        links_url: str = LINKS_URL,
        timeout_s: float = HTTP_TIMEOUT_S,
    ) -> None:
        self._links_url = links_url
        self._timeout_s = timeout_s

    async def resolve(self, session: Session, resource: str) -> dict[str, Any]:
        """Fetch the payload of *resource* for an authenticated session.

        Args:
            session: Session carrying the bearer token. Its token is
                invalidated when the service answers 401/403.
            resource: One of the known resource names.

        Returns:
            The resource's JSON object, or ``{}`` when unavailable.
        """
        if not session.is_authenticated:
            logger.debug("No token on session, skipping resource '%s'", resource)
            return {}

        headers = {**API_HEADERS, "Authorization": f"Bearer {session.token}"}
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_s, headers=headers
            ) as client:
                document = await self._get_json(client, self._links_url, session)
                if not session.is_authenticated:
                    return {}
                links = parse_links(document)
                url = links.get(resource)
                if url is None:
                    logger.warning(
                        "Resource '%s' not in discovery document (available: %s)",
                        resource,
                        sorted(links),
                    )
                    return {}
                payload = await self._get_json(client, url, session)
        except httpx.HTTPError as exc:
            logger.warning("Request for resource '%s' failed: %s", resource, exc)
            return {}

        if not isinstance(payload, dict):
            return {}
        return payload

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        session: Session,
    ) -> Any:
        """GET *url* and return the parsed JSON body, or ``None``."""
        response = await client.get(url)
        if response.status_code in _UNAUTHORIZED:
            logger.warning(
                "Token rejected (HTTP %d) for %s, invalidating session",
                response.status_code,
                url,
            )
            session.invalidate()
            return None
        try:
            return response.json()
        except ValueError:
            logger.warning(
                "Non-JSON response (HTTP %d) from %s", response.status_code, url
            )
            return None
