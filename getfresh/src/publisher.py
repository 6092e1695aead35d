"""
Publishes field sets to the key-value sink.

Fields are written in insertion order with display positions counting up
from a per-flow offset (tariff fields from 0, reading fields from 10), so the
two groups never interleave in a dashboard.

CHANGELOG:
- 2026-10-18: Mirror only the fields the sink accepted
- 2026-10-18: Mirror published fields to Redis when configured
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from getfresh.src.models import FieldSet, FieldValue

if TYPE_CHECKING:
    from getfresh.src.mirror import RedisMirror

logger = logging.getLogger(__name__)


class Sink(Protocol):
    """Anything with an async ``upsert(owner_id, name, value, position)``."""

    async def upsert(
        self, owner_id: str, name: str, value: FieldValue, position: int
    ) -> None: ...


class Publisher:
    """Writes field sets for one owning instance.

    Args:
        sink: Key-value sink, usually a
            :class:`~getfresh.src.variables.VariableStore`.
        owner_id: Instance id owning the published entries.
        mirror: Optional best-effort Redis mirror.
    """

    def __init__(
        self,
        sink: Sink,
        owner_id: str,
        mirror: RedisMirror | None = None,
    ) -> None:
        self._sink = sink
        self._owner_id = owner_id
        self._mirror = mirror

    async def publish(self, fields: FieldSet, position_offset: int) -> int:
        """Upsert every field, assigning positions from *position_offset*.

        A field whose value cannot be coerced to its entry type is logged
        and skipped; it still consumes its position so the remaining fields
        keep stable positions. Only accepted fields are sent to the mirror.

        Args:
            fields: Ordered field set built by one update cycle.
            position_offset: Position of the first field.

        Returns:
            Number of fields written to the sink.
        """
        written: FieldSet = {}
        for position, (name, value) in enumerate(fields.items(), start=position_offset):
            try:
                await self._sink.upsert(self._owner_id, name, value, position)
            except ValueError:
                logger.warning(
                    "Skipping field '%s': value %r does not match its type", name, value
                )
                continue
            written[name] = value

        if self._mirror is not None:
            await self._mirror.write(self._owner_id, written)

        logger.debug(
            "Published %d/%d fields for %s at offset %d",
            len(written),
            len(fields),
            self._owner_id,
            position_offset,
        )
        return len(written)
