"""
Pydantic models and shared types for the update flows.

Defines the per-cycle Session, the instance status codes, and the FieldSet
alias used between the extractors and the publisher.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, SecretStr

FieldValue = float | int | str
FieldSet = dict[str, FieldValue]
"""Ordered mapping of field name -> scalar value produced by one cycle."""


class InstanceStatus(IntEnum):
    """Instance status codes reported in the status file.

    The numeric values follow the codes used by the home automation module
    this daemon replaces, so existing dashboards keep working.
    """

    INACTIVE = 104
    ACTIVE = 102
    AUTH_ERROR = 201


class Session(BaseModel):
    """Account credentials plus the cached bearer token for one cycle.

    A Session is built at the start of every session-validity check from the
    configuration and the persistent token buffer. Only the token outlives
    the cycle (through the buffer).

    Attributes:
        email: Account email address.
        password: Account password.
        token: Bearer token, ``None`` until authenticated or after the
            service rejected it.
    """

    email: str
    password: SecretStr
    token: str | None = None

    @property
    def has_credentials(self) -> bool:
        """Whether both email and password are non-blank."""
        return bool(self.email and self.password.get_secret_value())

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def invalidate(self) -> None:
        """Drop the token after the service refused it."""
        self.token = None
