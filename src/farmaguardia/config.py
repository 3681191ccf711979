"""Environment-driven settings shared by the CLI, cache and parsers."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

LOGGER = logging.getLogger(__name__)

DEFAULT_TZ_NAME: Final[str] = "Europe/Madrid"

TZ_ENV: Final[str] = "FARMAGUARDIA_TZ"
NOW_ENV: Final[str] = "FARMAGUARDIA_NOW"
HOME_ENV: Final[str] = "FARMAGUARDIA_HOME"


def local_tz() -> ZoneInfo:
    """Return the zone every duty instant is evaluated in."""

    name = os.environ.get(TZ_ENV) or DEFAULT_TZ_NAME
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        LOGGER.warning("Unknown time zone %r in %s; using %s", name, TZ_ENV, DEFAULT_TZ_NAME)
        return ZoneInfo(DEFAULT_TZ_NAME)


def dev_override_now() -> datetime | None:
    """Return a developer-specified instant via FARMAGUARDIA_NOW (ISO 8601)."""

    value = os.environ.get(NOW_ENV)
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=local_tz())
    return parsed.astimezone(local_tz())


def local_now() -> datetime:
    """Return the current aware instant in the duty time zone."""

    override = dev_override_now()
    if override is not None:
        return override
    return datetime.now(tz=local_tz())


def data_home() -> Path:
    """Return the application data directory (not created here)."""

    value = os.environ.get(HOME_ENV)
    if value:
        return Path(value).expanduser()
    return Path.home() / ".farmaguardia"


__all__ = [
    "DEFAULT_TZ_NAME",
    "TZ_ENV",
    "NOW_ENV",
    "HOME_ENV",
    "local_tz",
    "dev_override_now",
    "local_now",
    "data_home",
]
