"""Schemas package."""

from .profiles import CaptureGroupDefinition, ProfileDefinition
from .events import EventRecord, ParseSummary

__all__ = [
    # Profiles
    "CaptureGroupDefinition",
    "ProfileDefinition",
    # Events
    "EventRecord",
    "ParseSummary",
]
