"""
Field metadata -- single source of truth for published values.

Maps every field name the extractors can produce to a display profile
(digits, unit suffix, icon, value type) and an archive kind. The publisher
consults this table once per field when the entry is first created in the
sink; later writes only update the value.

Profile definitions (digits / suffix / icon) mirror the variable profiles of
the original home automation module:

    Watt   float, 0 digits, " W",   Electricity
    kWh    float, 2 digits, " kWh", Electricity
    Price  float, 4 digits, " €",   Euro

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from getfresh.src.models import FieldValue

# ---------------------------------------------------------------------------
# Data definitions
# ---------------------------------------------------------------------------


class ProfileKind(str, Enum):
    """Display profile a field is bound to."""

    WATT = "Watt"
    KWH = "kWh"
    PRICE = "Price"
    FREE_TEXT = "FreeText"
    NUMBER = "Number"
    """Plain number without unit; used for unmapped numeric fields."""


class ArchiveKind(str, Enum):
    """How downstream archives aggregate a field."""

    DEFAULT = "default"
    COUNTER = "counter"


@dataclass(frozen=True, slots=True)
class DisplayProfile:
    """Formatting attached to a sink entry at creation time.

    Attributes:
        kind: The profile variant.
        value_type: ``"float"`` or ``"string"``; values are coerced to it.
        digits: Number of decimals shown (``None`` for text).
        suffix: Unit suffix appended on display.
        icon: Icon name for dashboards.
    """

    kind: ProfileKind
    value_type: str
    digits: int | None = None
    suffix: str = ""
    icon: str = ""

    def coerce(self, value: FieldValue) -> FieldValue:
        """Convert *value* to this profile's value type.

        Raises:
            ValueError: If a non-numeric string is written to a float entry.
        """
        if self.value_type == "string":
            return str(value)
        return float(value)

    def format(self, value: FieldValue) -> str:
        """Render *value* the way a dashboard would show it."""
        if self.value_type == "string":
            return str(value)
        return f"{float(value):.{self.digits or 0}f}{self.suffix}"


@dataclass(frozen=True, slots=True)
class FieldMeta:
    """Static metadata for a published field."""

    profile: DisplayProfile
    archive: ArchiveKind = ArchiveKind.DEFAULT


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

PROFILES: dict[ProfileKind, DisplayProfile] = {
    ProfileKind.WATT: DisplayProfile(
        ProfileKind.WATT, "float", digits=0, suffix=" W", icon="Electricity"
    ),
    ProfileKind.KWH: DisplayProfile(
        ProfileKind.KWH, "float", digits=2, suffix=" kWh", icon="Electricity"
    ),
    ProfileKind.PRICE: DisplayProfile(
        ProfileKind.PRICE, "float", digits=4, suffix=" €", icon="Euro"
    ),
    ProfileKind.FREE_TEXT: DisplayProfile(ProfileKind.FREE_TEXT, "string"),
    ProfileKind.NUMBER: DisplayProfile(ProfileKind.NUMBER, "float", digits=2),
}

# ---------------------------------------------------------------------------
# Field table
# ---------------------------------------------------------------------------

FIELD_METADATA: dict[str, FieldMeta] = {
    "Provider": FieldMeta(PROFILES[ProfileKind.FREE_TEXT]),
    "Base Price": FieldMeta(PROFILES[ProfileKind.PRICE]),
    "Price per kWh": FieldMeta(PROFILES[ProfileKind.PRICE]),
    "Meter Reading": FieldMeta(PROFILES[ProfileKind.KWH], ArchiveKind.COUNTER),
    "Power": FieldMeta(PROFILES[ProfileKind.WATT]),
    "Power L1": FieldMeta(PROFILES[ProfileKind.WATT]),
    "Power L2": FieldMeta(PROFILES[ProfileKind.WATT]),
    "Power L3": FieldMeta(PROFILES[ProfileKind.WATT]),
}


def metadata_for(name: str, value: FieldValue) -> FieldMeta:
    """Return the metadata for *name*, inferring it for unmapped fields.

    Unmapped string values become free text; anything else a plain number.
    """
    meta = FIELD_METADATA.get(name)
    if meta is not None:
        return meta
    if isinstance(value, str):
        return FieldMeta(PROFILES[ProfileKind.FREE_TEXT])
    return FieldMeta(PROFILES[ProfileKind.NUMBER])
