"""
eventparse - structured events from line-oriented text logs.

Lines are matched against a parsing profile: a line template whose `$TOKEN`
placeholders stand for typed capture groups. Temporal captures are folded
into one timestamp, the others become named fields, and unmatched lines are
merged, dropped or rejected according to the profile's failure policy.

Modules:
    - core: Configuration, logging, time helpers
    - parsers: Capture groups, profiles, built-in catalog, event parser
    - schemas: Pydantic models for profile exchange and event records
"""

from .parsers import (
    EventFormat,
    EventParser,
    FailurePolicy,
    ParsedEvent,
    ParsingAbortedError,
    ParsingProfile,
    MalformedProfileError,
    get_builtin_profile,
)

__version__ = "0.1.0"
__all__ = [
    "EventFormat",
    "EventParser",
    "FailurePolicy",
    "ParsedEvent",
    "ParsingAbortedError",
    "ParsingProfile",
    "MalformedProfileError",
    "get_builtin_profile",
    "__version__",
]
