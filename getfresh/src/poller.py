"""
Tariff and meter-reading update flows for the GetFresh API.

Both flows start with the same session-validity check:

1. Build a :class:`~getfresh.src.models.Session` from the configured
   email/password and the cached token.
2. Probe the service host; if it is unreachable raise
   :class:`UnreachableServiceError` (no status change).
3. Blank email or password -> end the cycle quietly (not configured yet).
4. No cached token -> log in, cache the token. Logins are serialized across
   both flows; a flow that waited reuses the token the other one cached.
   A failed login sets the instance status to AUTH_ERROR and raises
   :class:`InvalidCredentialsError`.
5. Set the instance status to ACTIVE.

The flows then resolve their resources, extract a field set, and publish it
(tariff at position 0, readings at position 10). Each flow carries a
skip-if-already-running guard so a slow network call never overlaps the next
timer tick.

CHANGELOG:
- 2026-10-18: Serialize login across flows; clear only the rejected token
- 2026-10-18: Clear cached token when the service rejects it
- 2026-10-18: Add per-flow overlap guard
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from getfresh.src.const import (
    READING_POSITION_OFFSET,
    REACHABILITY_PORT,
    REACHABILITY_TIMEOUT_S,
    RESOURCE_CONSUMPTION_CURRENT_MONTH,
    RESOURCE_CURRENT_READINGS,
    RESOURCE_PROFILE,
    SERVICE_HOST,
    TARIFF_POSITION_OFFSET,
)
from getfresh.src.errors import InvalidCredentialsError, UnreachableServiceError
from getfresh.src.extract import extract_prices, extract_provider, extract_reading
from getfresh.src.models import FieldSet, InstanceStatus, Session

if TYPE_CHECKING:
    from getfresh.src.auth import AuthClient
    from getfresh.src.config import FreshSettings
    from getfresh.src.credentials import CredentialStore
    from getfresh.src.links import LinkResolver
    from getfresh.src.publisher import Publisher
    from getfresh.src.status import StatusWriter

logger = logging.getLogger(__name__)

ReachabilityProbe = Callable[[], Awaitable[bool]]


# ---------------------------------------------------------------------------
# Reachability probe
# ---------------------------------------------------------------------------


async def is_service_reachable(
    host: str = SERVICE_HOST,
    port: int = REACHABILITY_PORT,
    timeout_s: float = REACHABILITY_TIMEOUT_S,
) -> bool:
    """Return True if a TCP connection to *host*:*port* opens within *timeout_s*."""
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port), timeout=timeout_s
        )
    except (OSError, TimeoutError):
        return False
    writer.close()
    with contextlib.suppress(OSError):
        await writer.wait_closed()
    return True


# ---------------------------------------------------------------------------
# Update flows
# ---------------------------------------------------------------------------


class FreshPoller:
    """Runs the tariff and reading update flows.

    Args:
        settings: Current daemon settings. Replaced via
            :meth:`apply_settings` when configuration is reloaded.
        auth: Token endpoint client.
        resolver: Link resolver for resource payloads.
        credentials: Persistent token buffer.
        publisher: Publisher for the owning instance.
        status: Instance status writer.
        probe: Async callable returning whether the service is reachable.
    """

    def __init__(
        self,
        *,
        settings: FreshSettings,
        auth: AuthClient,
        resolver: LinkResolver,
        credentials: CredentialStore,
        publisher: Publisher,
        status: StatusWriter,
        probe: ReachabilityProbe = is_service_reachable,
    ) -> None:
        self._settings = settings
        self._auth = auth
        self._resolver = resolver
        self._credentials = credentials
        self._publisher = publisher
        self._status = status
        self._probe = probe
        self._tariff_lock = asyncio.Lock()
        self._reading_lock = asyncio.Lock()
        self._login_lock = asyncio.Lock()

    def apply_settings(self, settings: FreshSettings) -> None:
        """Use *settings* from the next cycle on."""
        self._settings = settings

    # ------------------------------------------------------------------
    # Session validity check
    # ------------------------------------------------------------------

    async def ensure_session(self) -> Session | None:
        """Return an authenticated session, or None if not configured.

        Raises:
            UnreachableServiceError: If the service host cannot be reached.
            InvalidCredentialsError: If no token is cached and login fails.
        """
        session = Session(
            email=self._settings.email,
            password=self._settings.password,
            token=await self._credentials.load_token(),
        )

        if not await self._probe():
            raise UnreachableServiceError("API or internet connection not available")

        if not session.has_credentials:
            logger.debug("Email or password not configured, skipping cycle")
            return None

        if not session.is_authenticated:
            await self._login(session)

        self._status.set_status(InstanceStatus.ACTIVE)
        return session

    async def _login(self, session: Session) -> None:
        """Fill *session* with a token, logging in at most once across flows.

        The buffer is re-read under the login lock: if the other flow logged
        in while this one waited, its token is reused.
        """
        async with self._login_lock:
            cached = await self._credentials.load_token()
            if cached:
                session.token = cached
                return

            logger.info("Logging in to account of %s...", session.email)
            try:
                token = await self._auth.authenticate(
                    session.email, session.password.get_secret_value()
                )
            except InvalidCredentialsError:
                self._status.set_status(InstanceStatus.AUTH_ERROR)
                raise
            session.token = token
            await self._credentials.save_token(token)

    # ------------------------------------------------------------------
    # Flows
    # ------------------------------------------------------------------

    async def update_tariff(self) -> FieldSet | None:
        """Read provider and prices, publish them at offset 0.

        Returns:
            The published field set, or None when the cycle was skipped.
        """
        if self._tariff_lock.locked():
            logger.warning("Tariff update still running, skipping this tick")
            return None

        async with self._tariff_lock:
            session = await self.ensure_session()
            if session is None:
                return None
            issued = session.token

            fields: FieldSet = {}
            profile = await self._resolver.resolve(session, RESOURCE_PROFILE)
            fields.update(extract_provider(profile))

            tariff = await self._resolver.resolve(
                session, RESOURCE_CONSUMPTION_CURRENT_MONTH
            )
            fields.update(extract_prices(tariff))

            await self._drop_rejected_token(session, issued)

            logger.info("GetFresh tariff data: %s", json.dumps(fields))
            await self._publisher.publish(fields, TARIFF_POSITION_OFFSET)
            self._status.record_tariff()
            return fields

    async def update_readings(self) -> FieldSet | None:
        """Read the latest meter reading, publish it at offset 10.

        Returns:
            The published field set, or None when the cycle was skipped.
        """
        if self._reading_lock.locked():
            logger.warning("Reading update still running, skipping this tick")
            return None

        async with self._reading_lock:
            session = await self.ensure_session()
            if session is None:
                return None
            issued = session.token

            current = await self._resolver.resolve(session, RESOURCE_CURRENT_READINGS)
            fields = extract_reading(current)

            await self._drop_rejected_token(session, issued)

            logger.info("GetFresh data: %s", json.dumps(fields))
            await self._publisher.publish(fields, READING_POSITION_OFFSET)
            self._status.record_reading()
            return fields

    async def _drop_rejected_token(
        self, session: Session, issued: str | None
    ) -> None:
        """Clear the cached token if the service rejected *issued* this cycle.

        Only *issued* is removed; a newer token saved by the other flow in the
        meantime stays cached.
        """
        if issued and not session.is_authenticated:
            await self._credentials.clear_token(issued)
