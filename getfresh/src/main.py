"""
Daemon entry point for the GetFresh polling client.

Registers two recurring timers on the scheduler:
1. **tariff** (fixed 60 s): provider name and prices, published at
   position 0.
2. **readings** (``FRESH_INTERVAL`` seconds): latest meter reading and
   power values, published at position 10.

Both flows run once immediately at startup. An error in one cycle is logged
and discarded; the next tick is the retry. SIGTERM/SIGINT stop the timers
and wait for in-flight cycles. SIGHUP reloads the settings and re-arms the
readings timer with the new interval.

Structured JSON logging is used for all events.

CHANGELOG:
- 2026-10-18: Keep current settings when the env cannot be parsed on reload
- 2026-10-18: Reload settings on SIGHUP
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import json
import logging
import signal
import sys
from contextlib import AsyncExitStack
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import ValidationError
from pydantic_settings import SettingsError

from getfresh.src.const import TARIFF_INTERVAL_S
from getfresh.src.errors import InvalidCredentialsError, UnreachableServiceError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from getfresh.src.config import FreshSettings
    from getfresh.src.poller import FreshPoller
    from getfresh.src.scheduler import Scheduler

logger = logging.getLogger(__name__)

TARIFF_TIMER = "tariff"
READINGS_TIMER = "readings"


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


def configure_logging() -> None:
    """Configure structured JSON logging for the daemon.

    Sets up the root logger with a JSON-formatted handler writing to stderr.
    """

    class _JsonFormatter(logging.Formatter):
        """Minimal JSON log formatter."""

        def format(self, record: logging.LogRecord) -> str:
            log_entry = {
                "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
            }
            if record.exc_info and record.exc_info[1] is not None:
                log_entry["exception"] = self.formatException(record.exc_info)
            return json.dumps(log_entry)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.INFO)


# ---------------------------------------------------------------------------
# Startup config logging
# ---------------------------------------------------------------------------


def log_config_summary(settings: FreshSettings) -> None:
    """Log a config summary at startup, excluding the password.

    Args:
        settings: A FreshSettings instance (or any object with the same attrs).
    """
    logger.info(
        "GetFresh daemon starting with config: "
        "email=%s, password_set=%s, interval=%s, instance_id=%s, "
        "state_path=%s, status_path=%s, redis_mirror=%s",
        settings.email or "<unset>",
        bool(settings.password.get_secret_value()),
        settings.interval,
        settings.instance_id,
        settings.state_path,
        settings.status_path,
        bool(settings.redis_url),
    )
    if not settings.is_configured:
        logger.warning("Email or password not set; update cycles will be skipped")


# ---------------------------------------------------------------------------
# Single-cycle wrappers (easily testable)
# ---------------------------------------------------------------------------


async def _run_cycle(name: str, flow: Callable[[], Awaitable[object]]) -> None:
    """Run one update flow, logging and discarding any error.

    Args:
        name: Flow name for log lines.
        flow: The poller coroutine function to run.
    """
    try:
        await flow()
    except UnreachableServiceError:
        logger.error("GetFresh %s: API or internet connection not available!", name)
    except InvalidCredentialsError:
        logger.error(
            "GetFresh %s: The email address or password of your account is invalid!",
            name,
        )
    except Exception:
        logger.error("GetFresh %s cycle error", name, exc_info=True)


async def _tariff_once(poller: FreshPoller) -> None:
    await _run_cycle("tariff", poller.update_tariff)


async def _readings_once(poller: FreshPoller) -> None:
    await _run_cycle("readings", poller.update_readings)


# ---------------------------------------------------------------------------
# Timers and configuration reload
# ---------------------------------------------------------------------------


def register_timers(
    scheduler: Scheduler,
    poller: FreshPoller,
    settings: FreshSettings,
) -> None:
    """Arm the tariff and readings timers for *poller*."""
    scheduler.register(TARIFF_TIMER, TARIFF_INTERVAL_S, lambda: _tariff_once(poller))
    scheduler.register(
        READINGS_TIMER, settings.interval, lambda: _readings_once(poller)
    )


def reload_settings(
    scheduler: Scheduler,
    poller: FreshPoller,
    load: Callable[[], FreshSettings],
) -> FreshSettings | None:
    """Reload settings and re-arm the readings timer.

    Invalid settings are logged and ignored; the previous settings stay
    in effect.

    Args:
        scheduler: Running scheduler.
        poller: Poller receiving the new settings.
        load: Settings factory (``FreshSettings`` in production).

    Returns:
        The new settings, or None if they could not be loaded.
    """
    try:
        settings = load()
    except (ValidationError, SettingsError):
        logger.error("Configuration reload failed, keeping current settings", exc_info=True)
        return None

    poller.apply_settings(settings)
    scheduler.reschedule(READINGS_TIMER, settings.interval)
    logger.info("Configuration reloaded (interval=%ss)", settings.interval)
    return settings


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


async def async_main() -> None:
    """Async entrypoint: load config, build components, run timers.

    Sets up SIGTERM/SIGINT handlers for graceful shutdown and SIGHUP for
    configuration reload.
    """
    configure_logging()

    from getfresh.src.auth import AuthClient
    from getfresh.src.config import FreshSettings
    from getfresh.src.credentials import CredentialStore
    from getfresh.src.links import LinkResolver
    from getfresh.src.mirror import RedisMirror
    from getfresh.src.poller import FreshPoller
    from getfresh.src.publisher import Publisher
    from getfresh.src.scheduler import Scheduler
    from getfresh.src.status import StatusWriter
    from getfresh.src.variables import VariableStore

    settings = FreshSettings()
    log_config_summary(settings)

    scheduler = Scheduler()

    async with AsyncExitStack() as stack:
        credentials = await stack.enter_async_context(
            CredentialStore(settings.state_path)
        )
        sink = await stack.enter_async_context(VariableStore(settings.state_path))

        mirror = RedisMirror(settings.redis_url) if settings.redis_url else None
        poller = FreshPoller(
            settings=settings,
            auth=AuthClient(),
            resolver=LinkResolver(),
            credentials=credentials,
            publisher=Publisher(sink, settings.instance_id, mirror=mirror),
            status=StatusWriter(settings.status_path),
        )
        register_timers(scheduler, poller, settings)

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, lambda: _handle_signal(scheduler))
        loop.add_signal_handler(
            signal.SIGHUP,
            lambda: reload_settings(scheduler, poller, FreshSettings),
        )

        await scheduler.run()


def _handle_signal(scheduler: Scheduler) -> None:
    """Handle SIGTERM/SIGINT by stopping the scheduler.

    Args:
        scheduler: The scheduler to stop.
    """
    logger.info("Received shutdown signal, initiating graceful shutdown")
    scheduler.stop()


def main() -> None:
    """Synchronous entrypoint for the daemon."""
    asyncio.run(async_main())


if __name__ == "__main__":
    main()
