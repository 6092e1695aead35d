"""
Daemon configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
All variables carry the ``FRESH_`` prefix (``FRESH_EMAIL``,
``FRESH_PASSWORD``, ``FRESH_INTERVAL``, ...) and may also come from a
``.env`` file in the working directory.

CHANGELOG:
- 2026-10-18: Add optional Redis mirror URL
- 2026-10-18: Initial creation

TODO:
- None
"""

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FreshSettings(BaseSettings):
    """GetFresh daemon configuration.

    Nothing is strictly required at startup: a blank email or password means
    the account is not configured yet, and every update cycle ends quietly
    until both are set.

    Attributes:
        email: GetFresh account email address.
        password: GetFresh account password (never logged).
        interval: Seconds between meter-reading updates.
        instance_id: Owner id under which values are stored in the sink.
        state_path: SQLite file holding the token buffer and the published
            values.
        status_path: JSON file receiving the instance status.
        redis_url: Optional Redis URL; when set, published values are also
            mirrored into a Redis hash.
    """

    model_config = SettingsConfigDict(
        env_prefix="FRESH_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    email: str = ""
    password: SecretStr = SecretStr("")
    interval: int = 60
    instance_id: str = "getfresh"
    state_path: str = "/data/getfresh.db"
    status_path: str = "/data/status.json"
    redis_url: str = ""

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        """Drop surrounding whitespace so a blank value reads as unset."""
        return v.strip()

    @field_validator("interval")
    @classmethod
    def interval_must_be_positive(cls, v: int) -> int:
        """Validate the reading interval is at least one second."""
        if v < 1:
            raise ValueError("FRESH_INTERVAL must be >= 1 second")
        return v

    @field_validator("redis_url")
    @classmethod
    def redis_url_scheme(cls, v: str) -> str:
        """Validate the Redis URL scheme when a mirror is configured."""
        if v and not v.startswith(("redis://", "rediss://")):
            raise ValueError("FRESH_REDIS_URL must start with redis:// or rediss://")
        return v

    @property
    def is_configured(self) -> bool:
        """Whether both account credentials are present."""
        return bool(self.email and self.password.get_secret_value())
