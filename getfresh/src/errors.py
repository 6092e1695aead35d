"""
Exception types raised by the update flows.

Both errors end the current update cycle. They are caught by the timer
callback wrappers in :mod:`getfresh.src.main`, logged, and discarded so the
next tick runs normally.

CHANGELOG:
- 2026-10-18: Initial creation
"""


class FreshError(Exception):
    """Base class for GetFresh daemon errors."""


class UnreachableServiceError(FreshError):
    """The GetFresh service (or the internet connection) is not reachable."""


class InvalidCredentialsError(FreshError):
    """The account email/password was rejected or no token was issued."""
