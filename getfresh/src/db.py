"""
Shared aiosqlite connection lifecycle for the state database stores.

Subclasses set ``_SCHEMA_SQL`` and get open/close, the async context manager
protocol, and WAL mode. The token buffer and the variable sink both live in
the same database file.

CHANGELOG:
- 2026-10-18: Extract common connection handling from the two stores

TODO:
- None
"""

from __future__ import annotations

from pathlib import Path
from typing import Self

import aiosqlite


class SQLiteStore:
    """Base class for a store backed by one async SQLite connection.

    Args:
        path: Filesystem path for the SQLite database file.
              Accepts ``str`` or ``pathlib.Path``.
    """

    _SCHEMA_SQL: str = ""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._db: aiosqlite.Connection | None = None

    async def open(self) -> None:
        """Open the SQLite connection and initialize the schema."""
        self._db = await aiosqlite.connect(str(self._path))
        await self._db.execute("PRAGMA journal_mode=WAL;")
        await self._db.execute(self._SCHEMA_SQL)
        await self._db.commit()

    async def close(self) -> None:
        """Close the underlying SQLite connection."""
        if self._db is not None:
            await self._db.close()
            self._db = None

    async def __aenter__(self) -> Self:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    @property
    def _conn(self) -> aiosqlite.Connection:
        assert self._db is not None, "Store not opened. Call open() or use async with."
        return self._db
