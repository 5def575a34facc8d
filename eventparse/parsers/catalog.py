"""
Built-in parsing profiles, addressable by a stable id.
"""

from typing import Dict, Iterable, List, Optional

from .capture import CaptureGroup, TemporalCaptureGroup as T
from .profile import FailurePolicy, ParsingProfile

SEVERITY_EXPRESSION = r"(?i:TRACE|DEBUG|PERF|NOTE|INFO|WARN|WARNING|ERROR|FATAL)"

BUILTIN_ISO = ParsingProfile(
    "ISO-like timestamps",
    {
        T.YEAR: r"\d{4}",
        T.MONTH: r"\d{2}",
        T.DAY: r"\d{2}",
        T.HOUR: r"\d{2}",
        T.MINUTE: r"\d{2}",
        T.SECOND: r"\d{2}",
        T.FRACTION: r"\d{1,9}",
        CaptureGroup("SEVERITY"): SEVERITY_EXPRESSION,
    },
    r"\[$YEAR[/-]$MONTH[/-]$DAY[-\sT]$HOUR:$MINUTE:$SECOND([\.,]$FRACTION)?\]\s*(\[\s?$SEVERITY\s*\])?.*",
    FailurePolicy.CONCAT,
    profile_id="BUILTIN_ISO",
    built_in=True,
)

BUILTIN_ISO_STRICT = ParsingProfile(
    "ISO-like timestamps (strict)",
    {
        T.YEAR: r"\d{4}",
        T.MONTH: r"\d{2}",
        T.DAY: r"\d{2}",
        T.HOUR: r"\d{2}",
        T.MINUTE: r"\d{2}",
        T.SECOND: r"\d{2}",
        T.FRACTION: r"\d{3}",
        CaptureGroup("SEVERITY"): SEVERITY_EXPRESSION,
    },
    r"\[$YEAR-$MONTH-$DAY\s$HOUR:$MINUTE:$SECOND\.$FRACTION\]\s+\[$SEVERITY\s?\].*",
    FailurePolicy.CONCAT,
    profile_id="BUILTIN_ISO_STRICT",
    built_in=True,
)

BUILTIN_ISO_8601 = ParsingProfile(
    "ISO 8601 with offset",
    {
        T.YEAR: r"\d{4}",
        T.MONTH: r"\d{2}",
        T.DAY: r"\d{2}",
        T.HOUR: r"\d{2}",
        T.MINUTE: r"\d{2}",
        T.SECOND: r"\d{2}",
        T.FRACTION: r"\d{1,9}",
        T.OFFSET: r"Z|[+-]\d{2}(?::?\d{2})?",
        CaptureGroup("SEVERITY"): SEVERITY_EXPRESSION,
    },
    r"^$YEAR-$MONTH-$DAY[T\s]$HOUR:$MINUTE:$SECOND([\.,]$FRACTION)?$OFFSET?(\s+\[?$SEVERITY\]?)?(\s.*)?$",
    FailurePolicy.CONCAT,
    profile_id="BUILTIN_ISO_8601",
    built_in=True,
)

BUILTIN_SYSLOG = ParsingProfile(
    "Syslogs",
    {
        T.MONTH: r"[A-Za-z]{3}",
        T.DAY: r"\d{1,2}",
        T.HOUR: r"\d{2}",
        T.MINUTE: r"\d{2}",
        T.SECOND: r"\d{2}",
        CaptureGroup("HOST"): r"\S+",
        CaptureGroup("PROCESS"): r"[^\[:\s]+",
        CaptureGroup("PID"): r"\d+",
    },
    r"^$MONTH\s+$DAY\s$HOUR:$MINUTE:$SECOND\s$HOST\s$PROCESS(\[$PID\])?:\s.*",
    FailurePolicy.CONCAT,
    profile_id="BUILTIN_SYSLOG",
    built_in=True,
)

# Uptime decorations, e.g. "[54.144s][info][gc,phases   ] GC(59) ..."
BUILTIN_JVM_UL = ParsingProfile(
    "JVM unified logging",
    {
        T.ELAPSED_SECONDS: r"\d+",
        T.FRACTION: r"\d{3}",
        CaptureGroup("SEVERITY"): SEVERITY_EXPRESSION,
        CaptureGroup("TAGS"): r"[^\]\s]+",
    },
    r"^\[$ELAPSEDSECONDS[\.,]$FRACTION[s]\]\[$SEVERITY\s*\]\[$TAGS\s*\].*",
    FailurePolicy.CONCAT,
    profile_id="BUILTIN_JVM_UL",
    built_in=True,
)

BUILTIN_PROFILES: Dict[str, ParsingProfile] = {
    profile.profile_id: profile
    for profile in (
        BUILTIN_ISO,
        BUILTIN_ISO_STRICT,
        BUILTIN_ISO_8601,
        BUILTIN_SYSLOG,
        BUILTIN_JVM_UL,
    )
}


def list_builtin_profiles() -> List[ParsingProfile]:
    return list(BUILTIN_PROFILES.values())


def get_builtin_profile(profile_id: str) -> Optional[ParsingProfile]:
    return BUILTIN_PROFILES.get((profile_id or "").strip().upper())


def resolve_profile(
    profile_id: str,
    user_profiles: Iterable[ParsingProfile] = (),
) -> Optional[ParsingProfile]:
    """
    Find a profile by id among the built-ins, then among user profiles.

    Args:
        profile_id: Profile id
        user_profiles: Additional (usually editable) profiles

    Returns:
        The matching profile or None
    """
    profile = get_builtin_profile(profile_id)
    if profile is not None:
        return profile
    for candidate in user_profiles:
        if candidate.profile_id == profile_id:
            return candidate
    return None
