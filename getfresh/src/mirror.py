"""
Optional Redis mirror of published field values.

After each publish the field set is written into the hash
``getfresh:{owner_id}`` so other processes (dashboards, automation rules) can
read the latest values without touching the SQLite file. Mirroring is
best-effort: connection failures are logged but do not propagate exceptions.

CHANGELOG:
- 2026-10-18: Initial creation
"""

import json
import logging

import redis.asyncio as redis

from getfresh.src.models import FieldSet

logger = logging.getLogger(__name__)


def mirror_key(owner_id: str) -> str:
    """Return the Redis hash key for *owner_id*."""
    return f"getfresh:{owner_id}"


class RedisMirror:
    """Writes field sets to a Redis hash per owning instance.

    Args:
        url: Redis connection URL (``redis://`` or ``rediss://``).
    """

    def __init__(self, url: str) -> None:
        self._url = url

    async def write(self, owner_id: str, fields: FieldSet) -> None:
        """Mirror *fields* into the owner's hash. Never raises.

        Values are JSON-encoded so consumers can tell numbers from strings.
        """
        if not fields:
            return
        try:
            client = redis.from_url(self._url)
            try:
                await client.hset(
                    mirror_key(owner_id),
                    mapping={name: json.dumps(value) for name, value in fields.items()},
                )
            finally:
                await client.aclose()
        except Exception:
            logger.warning(
                "Failed to mirror %d fields for %s to Redis",
                len(fields),
                owner_id,
                exc_info=True,
            )
