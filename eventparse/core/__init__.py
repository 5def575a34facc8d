"""Core utilities package."""

from .config import settings, get_settings, Settings
from .logging import get_logger, setup_logging
from .time import (
    resolve_zone,
    offset_zone,
    resolve_anchor,
    from_epoch,
    to_utc_iso,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "get_logger",
    "setup_logging",
    "resolve_zone",
    "offset_zone",
    "resolve_anchor",
    "from_epoch",
    "to_utc_iso",
]
