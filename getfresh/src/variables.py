"""
Key-value sink for published fields, backed by async SQLite.

Each published field becomes one named, positioned, typed entry owned by an
instance id. Entries are created on first write with the display profile and
archive kind from :mod:`getfresh.src.fields`; later writes update only the
value, the position, and the timestamp. Formatting is never changed after
creation.

Operations:
- upsert(owner_id, name, value, position): Create or update an entry.
- get(owner_id, name): Return one entry or None.
- entries(owner_id): Return all entries of an owner ordered by position.

Supports async context manager protocol for clean resource management.

CHANGELOG:
- 2026-10-18: Share connection handling with the token buffer via SQLiteStore
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from getfresh.src.db import SQLiteStore
from getfresh.src.fields import PROFILES, ArchiveKind, ProfileKind, metadata_for
from getfresh.src.models import FieldValue

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS variables (
    owner_id TEXT NOT NULL,
    name TEXT NOT NULL,
    value TEXT NOT NULL,
    value_type TEXT NOT NULL,
    position INTEGER NOT NULL,
    profile TEXT NOT NULL,
    digits INTEGER,
    suffix TEXT NOT NULL DEFAULT '',
    icon TEXT NOT NULL DEFAULT '',
    archive TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (owner_id, name)
);
"""

_SELECT_PROFILE_SQL = """\
SELECT profile FROM variables WHERE owner_id = ? AND name = ?;
"""

_INSERT_SQL = """\
INSERT INTO variables (
    owner_id, name, value, value_type, position,
    profile, digits, suffix, icon, archive
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
"""

_UPDATE_SQL = """\
UPDATE variables
SET value = ?, position = ?, updated_at = datetime('now')
WHERE owner_id = ? AND name = ?;
"""

_SELECT_COLUMNS = (
    "name, value, value_type, position, profile, digits, suffix, icon, archive"
)

_GET_SQL = f"""\
SELECT {_SELECT_COLUMNS}
FROM variables
WHERE owner_id = ? AND name = ?;
"""  # noqa: S608

_LIST_SQL = f"""\
SELECT {_SELECT_COLUMNS}
FROM variables
WHERE owner_id = ?
ORDER BY position ASC, name ASC;
"""  # noqa: S608


@dataclass(frozen=True, slots=True)
class VariableEntry:
    """One stored field as read back from the sink."""

    name: str
    value: FieldValue
    value_type: str
    position: int
    profile: ProfileKind
    digits: int | None
    suffix: str
    icon: str
    archive: ArchiveKind

    @property
    def display(self) -> str:
        """The value rendered with the entry's display profile."""
        return PROFILES[self.profile].format(self.value)


def _row_to_entry(row: tuple) -> VariableEntry:
    return VariableEntry(
        name=row[0],
        value=json.loads(row[1]),
        value_type=row[2],
        position=row[3],
        profile=ProfileKind(row[4]),
        digits=row[5],
        suffix=row[6],
        icon=row[7],
        archive=ArchiveKind(row[8]),
    )


class VariableStore(SQLiteStore):
    """SQLite-backed sink of named, positioned values per owning instance.

    Values are stored JSON-encoded so numbers and strings round-trip with
    their type. The ``(owner_id, name)`` pair is unique: publishing the same
    name twice updates the entry in place.

    Usage::

        async with VariableStore(path="/data/getfresh.db") as sink:
            await sink.upsert("getfresh", "Power", 512, position=11)
    """

    _SCHEMA_SQL = _CREATE_TABLE_SQL

    async def upsert(
        self,
        owner_id: str,
        name: str,
        value: FieldValue,
        position: int,
    ) -> None:
        """Create or update the entry *name* owned by *owner_id*.

        On creation the display profile and archive kind are taken from the
        field metadata table. On update the stored profile is kept and the
        new value is coerced to the entry's existing value type.

        Args:
            owner_id: Instance id owning the entry.
            name: Field name.
            value: Scalar value to store.
            position: Display position.

        Raises:
            ValueError: If *value* cannot be coerced to the entry's type.
        """
        cursor = await self._conn.execute(_SELECT_PROFILE_SQL, (owner_id, name))
        existing = await cursor.fetchone()

        if existing is None:
            meta = metadata_for(name, value)
            profile = meta.profile
            await self._conn.execute(
                _INSERT_SQL,
                (
                    owner_id,
                    name,
                    json.dumps(profile.coerce(value)),
                    profile.value_type,
                    position,
                    profile.kind.value,
                    profile.digits,
                    profile.suffix,
                    profile.icon,
                    meta.archive.value,
                ),
            )
        else:
            profile = PROFILES[ProfileKind(existing[0])]
            await self._conn.execute(
                _UPDATE_SQL,
                (json.dumps(profile.coerce(value)), position, owner_id, name),
            )
        await self._conn.commit()

    async def get(self, owner_id: str, name: str) -> VariableEntry | None:
        """Return the entry *name* of *owner_id*, or ``None``."""
        cursor = await self._conn.execute(_GET_SQL, (owner_id, name))
        row = await cursor.fetchone()
        return _row_to_entry(row) if row is not None else None

    async def entries(self, owner_id: str) -> list[VariableEntry]:
        """Return all entries of *owner_id* ordered by position."""
        cursor = await self._conn.execute(_LIST_SQL, (owner_id,))
        rows = await cursor.fetchall()
        return [_row_to_entry(row) for row in rows]
