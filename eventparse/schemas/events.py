"""
Parsed event record schemas.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field

from ..core.time import to_utc_iso
from ..parsers.event import ParsedEvent


class EventRecord(BaseModel):
    """A parsed event as a plain, serializable record."""
    
    sequence: int = Field(..., description="Line number of the event's first line, -1 for ad hoc parses")
    timestamp: str = Field(..., description="ISO 8601 timestamp with offset")
    timestamp_utc: str = Field(..., description="ISO 8601 UTC timestamp")
    text: str = Field(..., description="Raw event text, continuation lines included")
    fields: Dict[str, str] = Field(default_factory=dict, description="Free-text captures")
    
    @classmethod
    def from_event(cls, event: ParsedEvent) -> "EventRecord":
        return cls(
            sequence=event.sequence,
            timestamp=event.timestamp.isoformat(),
            timestamp_utc=to_utc_iso(event.timestamp),
            text=event.text,
            fields=dict(event.fields),
        )


class ParseSummary(BaseModel):
    """Statistics from parsing one input."""
    
    source: str = Field(..., description="Parsed file")
    profile_id: str = Field(..., description="Profile used")
    lines_read: int = Field(default=0, description="Lines read from the input")
    events: int = Field(default=0, description="Events produced")
    chars_read: int = Field(default=0, description="Characters consumed")
    aborted: bool = Field(default=False, description="Parsing stopped on an unmatched line")
    error: Optional[str] = Field(None, description="Abort reason")
