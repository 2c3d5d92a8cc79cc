"""Environment-driven service settings.

Every knob is read from a ``SECRETSANTA_*`` environment variable so the
service can be configured without a config file.  Values that fail to parse
fall back to their defaults (with a warning) instead of refusing to start.

Usage::

    from secretsanta.core.settings import load_settings

    settings = load_settings()
    settings.max_participants

The variables are:

``SECRETSANTA_CORS_ORIGINS``
    comma-separated list of browser origins allowed to call the API.
``SECRETSANTA_MAX_PARTICIPANTS`` / ``SECRETSANTA_MAX_NAME_LENGTH``
    limits applied when a room is created.
``SECRETSANTA_LOCK_TIMEOUT``
    seconds to wait for a busy room before reporting a conflict.
``SECRETSANTA_PUBLIC_URL``
    base URL used for the room link returned on creation.
``SECRETSANTA_LOG_LEVEL``
    level handed to the ASGI server.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

__all__ = ["ENV_PREFIX", "Settings", "load_settings"]

logger = logging.getLogger(__name__)

ENV_PREFIX: Final = "SECRETSANTA_"

_DEFAULT_ORIGINS: Final = ("http://localhost:3000", "http://127.0.0.1:3000")
_LOG_LEVELS: Final = frozenset({"critical", "error", "warning", "info", "debug", "trace"})


@dataclass(frozen=True)
class Settings:
    cors_origins: tuple[str, ...] = _DEFAULT_ORIGINS
    max_participants: int = 200
    max_name_length: int = 64
    lock_timeout: float = 5.0
    public_url: str | None = None
    log_level: str = "info"


def _parse_csv(raw: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    if raw is None:
        return default
    return tuple(entry.strip().rstrip("/") for entry in raw.split(",") if entry.strip())


def _parse_int(name: str, raw: str | None, default: int, minimum: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s%s=%r; using %s", ENV_PREFIX, name, raw, default)
        return default
    return max(minimum, value)


def _parse_float(name: str, raw: str | None, default: float, minimum: float) -> float:
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s%s=%r; using %s", ENV_PREFIX, name, raw, default)
        return default
    if value != value:  # NaN
        return default
    return max(minimum, value)


def _parse_level(raw: str | None, default: str) -> str:
    level = (raw or "").strip().lower()
    if not level:
        return default
    if level not in _LOG_LEVELS:
        logger.warning("Unknown log level %r; using %s", raw, default)
        return default
    return level


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``environ`` (defaults to ``os.environ``)."""

    env = os.environ if environ is None else environ
    defaults = Settings()

    def get(name: str) -> str | None:
        return env.get(ENV_PREFIX + name)

    public_url = (get("PUBLIC_URL") or "").strip().rstrip("/") or None
    return Settings(
        cors_origins=_parse_csv(get("CORS_ORIGINS"), defaults.cors_origins),
        max_participants=_parse_int("MAX_PARTICIPANTS", get("MAX_PARTICIPANTS"), defaults.max_participants, 2),
        max_name_length=_parse_int("MAX_NAME_LENGTH", get("MAX_NAME_LENGTH"), defaults.max_name_length, 1),
        lock_timeout=_parse_float("LOCK_TIMEOUT", get("LOCK_TIMEOUT"), defaults.lock_timeout, 0.01),
        public_url=public_url,
        log_level=_parse_level(get("LOG_LEVEL"), defaults.log_level),
    )
