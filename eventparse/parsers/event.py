"""
Parsed event - the immutable result of matching one log event.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from types import MappingProxyType
from typing import Mapping

# Sequence number of events parsed outside of a stream
AD_HOC_SEQUENCE = -1


@dataclass(frozen=True)
class ParsedEvent:
    """
    One log event.

    `sequence` is the 1-based line number of the event's first line, or
    AD_HOC_SEQUENCE for single-line parses. `text` holds every line of the
    event, continuation lines included.
    """
    sequence: int
    timestamp: datetime
    text: str
    fields: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def with_continuation(self, line: str) -> "ParsedEvent":
        """
        Get a copy of this event with one more line appended to its text.

        Each call copies the accumulated text, so an event made of n lines
        costs O(n^2) characters copied in total. Consumers rely on events
        never changing once handed out; keep that in mind before reworking
        this into an in-place buffer.
        """
        return replace(self, text=f"{self.text}\n{line}")

    def __str__(self) -> str:
        return f"ParsedEvent{{timestamp={self.timestamp.isoformat()}, fields={dict(self.fields)}, text={self.text!r}}}"
