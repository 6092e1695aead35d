"""
Persistent token buffer backed by async SQLite.

The bearer token issued by the GetFresh token endpoint is cached in a single
named buffer slot (``token``) so it survives process restarts and does not
force a fresh login every cycle. The slot is cleared when the service
rejects the token it holds.

Operations:
- load_token(): Return the cached token or None.
- save_token(token): Store a freshly issued token.
- clear_token(token): Drop the cached token if it is still *token*.

Supports async context manager protocol for clean resource management.

CHANGELOG:
- 2026-10-18: clear_token only drops the token that was rejected
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

from getfresh.src.db import SQLiteStore

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS buffer (
    name TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

_UPSERT_SQL = """\
INSERT INTO buffer (name, value) VALUES (?, ?)
ON CONFLICT(name) DO UPDATE SET value = excluded.value;
"""

_SELECT_SQL = "SELECT value FROM buffer WHERE name = ?;"

_DELETE_SQL = "DELETE FROM buffer WHERE name = ? AND value = ?;"

TOKEN_SLOT = "token"


class CredentialStore(SQLiteStore):
    """Durable storage for the cached bearer token.

    Account email and password are not stored here; they come from
    :class:`~getfresh.src.config.FreshSettings` on every cycle.

    Usage::

        async with CredentialStore(path="/data/getfresh.db") as store:
            token = await store.load_token()
    """

    _SCHEMA_SQL = _CREATE_TABLE_SQL

    async def load_token(self) -> str | None:
        """Return the cached token, or ``None`` when the slot is empty."""
        cursor = await self._conn.execute(_SELECT_SQL, (TOKEN_SLOT,))
        row = await cursor.fetchone()
        if row is None or not row[0]:
            return None
        return row[0]

    async def save_token(self, token: str) -> None:
        """Persist a token issued by a successful authentication.

        Args:
            token: Non-empty bearer token.

        Raises:
            ValueError: If *token* is empty.
        """
        if not token:
            raise ValueError("Refusing to cache an empty token")
        await self._conn.execute(_UPSERT_SQL, (TOKEN_SLOT, token))
        await self._conn.commit()

    async def clear_token(self, token: str) -> bool:
        """Remove the cached token if it still equals *token*.

        A newer token saved by another flow in the meantime is kept.

        Returns:
            True if the slot was cleared.
        """
        cursor = await self._conn.execute(_DELETE_SQL, (TOKEN_SLOT, token))
        await self._conn.commit()
        return cursor.rowcount > 0
