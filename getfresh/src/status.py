"""
Instance status file writer.

Writes a JSON status file at a configurable path with four fields:
- status: numeric instance status code (102 active, 104 inactive,
  201 authentication error).
- status_name: the code's name, for humans.
- last_tariff_ts: ISO timestamp of the most recent tariff publish.
- last_reading_ts: ISO timestamp of the most recent reading publish.

The file is rewritten on every state change, providing a simple liveness
signal that Docker HEALTHCHECK or monitoring can inspect.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from getfresh.src.models import InstanceStatus


class StatusWriter:
    """Writes the instance status to a JSON file.

    Each mutating method updates the in-memory state and immediately
    rewrites the file so it always reflects the latest status.

    Args:
        path: Filesystem path for the status JSON file. Accepts str or Path.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._status = InstanceStatus.INACTIVE
        self._last_tariff_ts: str | None = None
        self._last_reading_ts: str | None = None

    @property
    def status(self) -> InstanceStatus:
        return self._status

    def set_status(self, status: InstanceStatus) -> None:
        """Update the instance status and write the file (only on change)."""
        if status == self._status and self.path.exists():
            return
        self._status = status
        self._write()

    def record_tariff(self) -> None:
        """Record a tariff publish and write the file."""
        self._last_tariff_ts = datetime.now(tz=UTC).isoformat()
        self._write()

    def record_reading(self) -> None:
        """Record a reading publish and write the file."""
        self._last_reading_ts = datetime.now(tz=UTC).isoformat()
        self._write()

    def _write(self) -> None:
        data = {
            "status": int(self._status),
            "status_name": self._status.name,
            "last_tariff_ts": self._last_tariff_ts,
            "last_reading_ts": self._last_reading_ts,
        }
        self.path.write_text(json.dumps(data))
