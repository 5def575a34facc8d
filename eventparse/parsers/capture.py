"""
Capture group model - named regions of a line template.

A capture group is either free text (its captured value lands in the event's
field map) or temporal (its captured value is folded into the event's
timestamp). Temporal groups form a closed set; each member knows how to parse
its captured text and which slot of a TimestampAccumulator it fills.
"""

import calendar
import re
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from enum import Enum
from typing import Optional, Union

from ..core.time import from_epoch, offset_zone

# Canonical names double as regex group names and must be reachable by a
# `$TOKEN` placeholder, hence letters and digits only.
_CANONICAL_NAME = re.compile(r"^[A-Z][A-Z0-9]+$")

_OFFSET_PATTERN = re.compile(r"^(?:(?P<utc>Z|UTC|GMT)|(?P<sign>[+-])(?P<hours>\d{2}):?(?P<minutes>\d{2})?)$", re.IGNORECASE)

MAX_OFFSET_SECONDS = 18 * 3600

MONTH_NAMES = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}


def canonical_name(name: str) -> str:
    """
    Normalize a capture group name or template token.

    Strips a leading `$`, surrounding whitespace and underscores, and
    upper-cases the rest: "$year", "Year" and "YEAR" are the same group,
    and "elapsed_seconds" is addressed as `$ELAPSEDSECONDS`.
    """
    return (name or "").strip().lstrip("$").replace("_", "").upper()


@dataclass(frozen=True)
class CaptureGroup:
    """A free-text capture group; equal to any group with the same canonical name."""
    group_name: str

    def __post_init__(self):
        normalized = canonical_name(self.group_name)
        if not _CANONICAL_NAME.match(normalized):
            raise ValueError(
                f"Invalid capture group name {self.group_name!r}: "
                "expected a letter followed by letters or digits"
            )
        object.__setattr__(self, "group_name", normalized)

    @property
    def is_temporal(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.group_name


@dataclass
class TimestampAccumulator:
    """
    Running state of a timestamp being assembled from partial captures.

    Each temporal group writes its own slot; nothing is combined until
    `resolve()`, which keeps folding order irrelevant.
    """
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    microsecond: int = 0
    epoch_seconds: Optional[int] = None
    epoch_millis: Optional[int] = None
    zone: Optional[tzinfo] = field(default=None)
    year_captured: bool = False

    @classmethod
    def from_anchor(cls, anchor: datetime) -> "TimestampAccumulator":
        """Seed every calendar slot from a naive anchor date-time."""
        return cls(
            year=anchor.year,
            month=anchor.month,
            day=anchor.day,
            hour=anchor.hour,
            minute=anchor.minute,
            second=anchor.second,
            microsecond=anchor.microsecond,
        )

    def resolve(self, default_zone: tzinfo) -> datetime:
        """
        Build the aware timestamp.

        Epoch millis win over epoch seconds, which win over calendar
        fields. A captured offset replaces `default_zone`.

        Without a captured year, Feb 29 falls back to the nearest leap
        year at or before the anchor year.

        Raises:
            ValueError: if the slots do not form a valid date-time
        """
        zone = self.zone or default_zone
        if self.epoch_millis is not None:
            seconds, millis = divmod(self.epoch_millis, 1000)
            return from_epoch(seconds, millis * 1000, zone)
        if self.epoch_seconds is not None:
            return from_epoch(self.epoch_seconds, self.microsecond, zone)
        year = self.year
        if not self.year_captured and (self.month, self.day) == (2, 29):
            while not calendar.isleap(year):
                year -= 1
        return datetime(
            year, self.month, self.day,
            self.hour, self.minute, self.second, self.microsecond,
            tzinfo=zone,
        )


def _parse_int(text: str) -> int:
    return int(text.strip())


def _parse_month(text: str) -> int:
    value = text.strip()
    if value.isdigit():
        return int(value)
    try:
        return MONTH_NAMES[value.lower()]
    except KeyError:
        raise ValueError(f"Unknown month name: {text!r}") from None


def _parse_fraction(text: str) -> int:
    digits = text.strip()
    if not digits.isdigit():
        raise ValueError(f"Invalid second fraction: {text!r}")
    # Sub-microsecond digits are truncated
    return int(digits[:6].ljust(6, "0"))


def _parse_offset(text: str) -> int:
    m = _OFFSET_PATTERN.match(text.strip())
    if not m:
        raise ValueError(f"Invalid zone offset: {text!r}")
    if m.group("utc"):
        return 0
    seconds = int(m.group("hours")) * 3600 + int(m.group("minutes") or 0) * 60
    if seconds > MAX_OFFSET_SECONDS:
        raise ValueError(f"Zone offset out of range: {text!r}")
    return -seconds if m.group("sign") == "-" else seconds


class TemporalCaptureGroup(Enum):
    """Capture groups whose value folds into the event timestamp."""

    YEAR = "YEAR"
    MONTH = "MONTH"
    DAY = "DAY"
    HOUR = "HOUR"
    MINUTE = "MINUTE"
    SECOND = "SECOND"
    FRACTION = "FRACTION"
    MILLI = "MILLI"
    ELAPSED_SECONDS = "ELAPSEDSECONDS"
    ELAPSED_MILLIS = "ELAPSEDMILLIS"
    OFFSET = "OFFSET"

    @property
    def group_name(self) -> str:
        return self.value

    @property
    def is_temporal(self) -> bool:
        return True

    @classmethod
    def from_name(cls, name: str) -> "TemporalCaptureGroup":
        """
        Look up a member by (canonical) name.

        Raises:
            ValueError: if no temporal group has this name
        """
        normalized = canonical_name(name)
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Not a temporal capture group: {name!r}")

    def parse(self, text: str) -> int:
        """Parse captured text into this group's numeric value."""
        return _PARSERS.get(self, _parse_int)(text)

    def fold(self, accumulator: TimestampAccumulator, text: str) -> None:
        """Parse captured text and write it into the accumulator."""
        value = self.parse(text)
        if self is TemporalCaptureGroup.OFFSET:
            accumulator.zone = offset_zone(value)
        elif self is TemporalCaptureGroup.MILLI:
            if not 0 <= value <= 999:
                raise ValueError(f"Milliseconds out of range: {value}")
            accumulator.microsecond = value * 1000
        else:
            setattr(accumulator, _SLOTS[self], value)
            if self is TemporalCaptureGroup.YEAR:
                accumulator.year_captured = True

    def __str__(self) -> str:
        return self.value


_PARSERS = {
    TemporalCaptureGroup.MONTH: _parse_month,
    TemporalCaptureGroup.FRACTION: _parse_fraction,
    TemporalCaptureGroup.OFFSET: _parse_offset,
}

_SLOTS = {
    TemporalCaptureGroup.YEAR: "year",
    TemporalCaptureGroup.MONTH: "month",
    TemporalCaptureGroup.DAY: "day",
    TemporalCaptureGroup.HOUR: "hour",
    TemporalCaptureGroup.MINUTE: "minute",
    TemporalCaptureGroup.SECOND: "second",
    TemporalCaptureGroup.FRACTION: "microsecond",
    TemporalCaptureGroup.ELAPSED_SECONDS: "epoch_seconds",
    TemporalCaptureGroup.ELAPSED_MILLIS: "epoch_millis",
}


NamedCaptureGroup = Union[CaptureGroup, TemporalCaptureGroup]


def capture_group_of(name: str) -> NamedCaptureGroup:
    """
    Get the capture group for a name, promoting temporal names.

    Args:
        name: Group name or `$TOKEN`

    Returns:
        The matching TemporalCaptureGroup member, or a free-text CaptureGroup
    """
    try:
        return TemporalCaptureGroup.from_name(name)
    except ValueError:
        return CaptureGroup(name)
