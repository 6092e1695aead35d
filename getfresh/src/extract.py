"""
Pure extractors turning GetFresh resource payloads into field sets.

Each extractor takes the JSON payload of one resource (as returned by the
link resolver) and returns an ordered ``{field name: value}`` dict. Keys that
are missing, null, or not scalar are simply left out; no placeholder values
are synthesized. An empty payload yields an empty field set.

This module is pure: no I/O, no clock.

CHANGELOG:
- 2026-10-18: Skip extraction on empty readings sequence
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from typing import Any

from getfresh.src.models import FieldSet, FieldValue

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Mapping from field name to payload key path.
# ---------------------------------------------------------------------------

_PROFILE_MAP: dict[str, tuple[str, ...]] = {
    "Provider": ("brandName",),
}
"""Maps field name -> key path inside the ``profile`` payload."""

_TARIFF_MAP: dict[str, tuple[str, ...]] = {
    "Base Price": ("monthlyBasePrice", "value"),
    "Price per kWh": ("unitPrice", "value"),
}
"""Maps field name -> key path inside the ``consumptionCurrentMonth`` payload."""

_READING_MAP: dict[str, tuple[str, ...]] = {
    "Meter Reading": ("energyReading",),
    "Power": ("power",),
    "Power L1": ("powerPhase1",),
    "Power L2": ("powerPhase2",),
    "Power L3": ("powerPhase3",),
}
"""Maps field name -> key inside one element of ``readings``."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _lookup(payload: Any, path: tuple[str, ...]) -> FieldValue | None:
    """Follow *path* into nested dicts and return a scalar leaf, or None."""
    node = payload
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    # bool is an int subclass but never a meaningful reading
    if isinstance(node, bool) or not isinstance(node, (int, float, str)):
        return None
    return node


def _apply_map(payload: Any, mapping: dict[str, tuple[str, ...]]) -> FieldSet:
    fields: FieldSet = {}
    for field_name, path in mapping.items():
        value = _lookup(payload, path)
        if value is None:
            logger.debug("Field '%s' missing from payload, skipping", field_name)
            continue
        fields[field_name] = value
    return fields


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_provider(profile: dict[str, Any]) -> FieldSet:
    """Extract ``Provider`` from the ``profile`` resource."""
    return _apply_map(profile, _PROFILE_MAP)


def extract_prices(tariff: dict[str, Any]) -> FieldSet:
    """Extract ``Base Price`` and ``Price per kWh`` from ``consumptionCurrentMonth``."""
    return _apply_map(tariff, _TARIFF_MAP)


def extract_reading(current_readings: dict[str, Any]) -> FieldSet:
    """Extract meter reading and power fields from ``currentReadings``.

    The service returns ``readings`` oldest first, so only the last element
    is used. An empty or missing sequence yields an empty field set.

    Args:
        current_readings: Payload of the ``currentReadings`` resource.

    Returns:
        Field set with any of ``Meter Reading``, ``Power``, ``Power L1``,
        ``Power L2``, ``Power L3``.
    """
    readings = current_readings.get("readings") if current_readings else None
    if not isinstance(readings, list) or not readings:
        if current_readings:
            logger.warning("Empty readings sequence, skipping reading fields")
        return {}

    latest = readings[-1]
    if not isinstance(latest, dict):
        logger.warning("Latest reading is not an object, skipping reading fields")
        return {}
    return _apply_map(latest, _READING_MAP)
