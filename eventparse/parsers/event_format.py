"""
Event format - binds a parsing profile to an encoding, a time zone and a
temporal anchor, and creates parsers over byte streams.
"""

import codecs
import io
from datetime import datetime, tzinfo
from pathlib import Path
from typing import BinaryIO, Callable, Dict, List, Optional, Union

from ..core.config import settings
from ..core.logging import get_logger
from ..core.time import AnchorLike, ZoneLike, resolve_anchor, resolve_zone
from .capture import NamedCaptureGroup, TimestampAccumulator
from .event import AD_HOC_SEQUENCE, ParsedEvent
from .event_parser import EventParser
from .profile import ParsingProfile

logger = get_logger(__name__)


class LineMatcher:
    """
    A profile's pattern and capture groups, frozen for one parsing session
    together with the zone and the resolved anchor.
    """

    def __init__(self, profile: ParsingProfile, zone: tzinfo, anchor: datetime):
        self.pattern = profile.pattern
        self.zone = zone
        self.anchor = anchor
        self._groups: Dict[str, NamedCaptureGroup] = {
            group.group_name: group for group in profile.capture_groups
        }

    def match(self, text: str, sequence: int) -> Optional[ParsedEvent]:
        """
        Match one line and build its event.

        Blank captures are skipped. Temporal captures are folded into the
        timestamp, the others become fields. A line whose temporal captures
        do not form a valid timestamp is treated as not matching.

        Returns:
            ParsedEvent, or None if the line does not match
        """
        m = self.pattern.search(text)
        if m is None:
            return None

        accumulator = TimestampAccumulator.from_anchor(self.anchor)
        fields: Dict[str, str] = {}
        try:
            for name, value in m.groupdict().items():
                if value is None or not value.strip():
                    continue
                group = self._groups.get(name)
                if group is None:
                    # Named group declared inside a fragment, not by the profile
                    continue
                if group.is_temporal:
                    group.fold(accumulator, value)
                else:
                    fields[name] = value
            timestamp = accumulator.resolve(self.zone)
        except (ValueError, OverflowError) as e:
            logger.debug(f"Line {sequence} matched but has no valid timestamp: {e}")
            return None

        return ParsedEvent(sequence, timestamp, text, fields)


class EventFormat:
    """How to read a stream of log events: profile, encoding, zone and anchor."""

    def __init__(
        self,
        profile: ParsingProfile,
        zone: Optional[ZoneLike] = None,
        encoding: Optional[str] = None,
        anchor: Optional[AnchorLike] = None,
    ):
        """
        Args:
            profile: Parsing profile
            zone: Zone of timestamps without an offset (defaults to settings)
            encoding: Character encoding of the input (defaults to settings)
            anchor: Source of uncaptured temporal fields (defaults to settings)

        Raises:
            ValueError: unknown zone
            LookupError: unknown encoding
        """
        self._profile = profile
        self._zone = resolve_zone(zone if zone is not None else settings.default_zone)
        self._encoding = codecs.lookup(encoding or settings.default_encoding).name
        self._anchor = anchor if anchor is not None else settings.temporal_anchor

    @property
    def profile(self) -> ParsingProfile:
        return self._profile

    @property
    def zone(self) -> tzinfo:
        return self._zone

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def anchor(self) -> AnchorLike:
        return self._anchor

    def resolve_anchor(self, now: Optional[datetime] = None) -> datetime:
        """Resolve the anchor to a naive date-time in this format's zone."""
        return resolve_anchor(self._anchor, self._zone, now)

    def matcher(self, now: Optional[datetime] = None) -> LineMatcher:
        return LineMatcher(self._profile, self._zone, self.resolve_anchor(now))

    def parse(
        self,
        stream: Union[BinaryIO, io.TextIOBase],
        progress_callback: Optional[Callable[[int], None]] = None,
    ) -> EventParser:
        """
        Create a parser reading events from a stream.

        The parser takes ownership of the stream and closes it.
        """
        return EventParser(self, stream, progress_callback=progress_callback)

    def open(
        self,
        path: Union[str, Path],
        progress_callback: Optional[Callable[[int], None]] = None,
    ) -> EventParser:
        """Create a parser reading events from a file."""
        stream = open(path, "rb")
        try:
            return self.parse(stream, progress_callback=progress_callback)
        except BaseException:
            stream.close()
            raise

    def parse_line(self, text: str, sequence: int = AD_HOC_SEQUENCE) -> Optional[ParsedEvent]:
        """
        Parse a single line outside of any stream.

        Returns:
            ParsedEvent, or None if the line does not match
        """
        return self.matcher().match(text, sequence)

    def parse_text(self, sample: str) -> List[ParsedEvent]:
        """
        Parse an in-memory sample with the full stream semantics
        (multi-line aggregation and failure policy included).

        Used to try a profile out on a few lines of log.
        """
        with self.parse(io.StringIO(sample, newline=None)) as parser:
            return list(parser)

    def __repr__(self) -> str:
        return f"EventFormat(profile={self._profile!r}, zone={self._zone!r}, encoding={self._encoding!r})"
