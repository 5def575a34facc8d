"""
Time zone and anchor utilities.
Resolves zone names, offset zones and the default timestamp anchor.
"""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional, Union

from dateutil import parser as dateutil_parser
from dateutil import tz


EPOCH = datetime(1970, 1, 1)

ZoneLike = Union[str, tzinfo]
AnchorLike = Union[str, datetime]


def resolve_zone(zone: ZoneLike) -> tzinfo:
    """
    Resolve a zone name or tzinfo into a tzinfo.
    
    Args:
        zone: IANA zone name ("Europe/Paris"), "UTC"/"Z", or a tzinfo
        
    Returns:
        tzinfo instance
        
    Raises:
        ValueError: if the name is not a known zone
    """
    if isinstance(zone, tzinfo):
        return zone
    
    name = (zone or "").strip()
    if name.upper() in ("UTC", "Z", "GMT"):
        return tz.UTC
    
    resolved = tz.gettz(name) if name else None
    if resolved is None:
        raise ValueError(f"Unknown time zone: {zone!r}")
    return resolved


def offset_zone(offset_seconds: int) -> tzinfo:
    """Get a fixed-offset zone; a zero offset maps to UTC."""
    if offset_seconds == 0:
        return tz.UTC
    return tz.tzoffset(None, offset_seconds)


def resolve_anchor(
    anchor: AnchorLike,
    zone: tzinfo,
    now: Optional[datetime] = None,
) -> datetime:
    """
    Resolve an anchor into the naive local date-time that supplies
    every temporal field a profile does not capture.
    
    Args:
        anchor: a datetime, "epoch", "today", "now" or a parseable date string
        zone: zone used to interpret "today"/"now" and aware datetimes
        now: current instant override (aware), for reproducible tests
        
    Returns:
        Naive datetime expressed in `zone`
        
    Raises:
        ValueError: if a string anchor cannot be parsed
    """
    if isinstance(anchor, datetime):
        if anchor.tzinfo is not None:
            anchor = anchor.astimezone(zone)
        return anchor.replace(tzinfo=None)
    
    keyword = anchor.strip().lower()
    if keyword == "epoch":
        return EPOCH
    
    current = (now or datetime.now(timezone.utc)).astimezone(zone).replace(tzinfo=None)
    if keyword == "now":
        return current
    if keyword == "today":
        return current.replace(hour=0, minute=0, second=0, microsecond=0)
    
    try:
        parsed = dateutil_parser.parse(anchor)
    except (ValueError, OverflowError, dateutil_parser.ParserError) as e:
        raise ValueError(f"Invalid temporal anchor {anchor!r}: {e}") from e
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(zone)
    return parsed.replace(tzinfo=None)


def from_epoch(seconds: int, microseconds: int, zone: tzinfo) -> datetime:
    """Build an aware datetime from an instant expressed since the epoch."""
    instant = datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(
        seconds=seconds, microseconds=microseconds
    )
    return instant.astimezone(zone)


def to_utc_iso(dt: datetime) -> str:
    """
    Convert an aware datetime to a UTC ISO 8601 string.
    
    Args:
        dt: datetime object; naive values are taken as UTC
        
    Returns:
        ISO 8601 formatted string in UTC, millisecond precision
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    else:
        dt = dt.replace(tzinfo=timezone.utc)
    
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
