"""Parsers package."""

from .capture import (
    CaptureGroup,
    TemporalCaptureGroup,
    NamedCaptureGroup,
    TimestampAccumulator,
    canonical_name,
    capture_group_of,
)
from .profile import (
    FailurePolicy,
    ParsingProfile,
    MalformedProfileError,
    ReadOnlyProfileError,
    build_pattern_string,
    compile_pattern,
)
from .catalog import (
    BUILTIN_PROFILES,
    get_builtin_profile,
    list_builtin_profiles,
    resolve_profile,
)
from .event import ParsedEvent, AD_HOC_SEQUENCE
from .event_parser import EventParser, ParserState, ParsingAbortedError
from .event_format import EventFormat, LineMatcher

__all__ = [
    # Capture groups
    "CaptureGroup",
    "TemporalCaptureGroup",
    "NamedCaptureGroup",
    "TimestampAccumulator",
    "canonical_name",
    "capture_group_of",
    # Profiles
    "FailurePolicy",
    "ParsingProfile",
    "MalformedProfileError",
    "ReadOnlyProfileError",
    "build_pattern_string",
    "compile_pattern",
    # Catalog
    "BUILTIN_PROFILES",
    "get_builtin_profile",
    "list_builtin_profiles",
    "resolve_profile",
    # Events
    "ParsedEvent",
    "AD_HOC_SEQUENCE",
    "EventParser",
    "ParserState",
    "ParsingAbortedError",
    "EventFormat",
    "LineMatcher",
]
