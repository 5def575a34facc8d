#!/usr/bin/env python3
"""
Parse a log file with a parsing profile and print its events as JSON lines.

Events go to stdout, the summary to stderr.

Usage: python scripts/parse_log.py <file> [profile_id_or_definition.json] [zone]
"""

import sys
from pathlib import Path

from pydantic import ValidationError

from eventparse.core.config import settings
from eventparse.core.logging import setup_logging
from eventparse.parsers import (
    EventFormat,
    MalformedProfileError,
    ParsingAbortedError,
    get_builtin_profile,
    list_builtin_profiles,
)
from eventparse.schemas import EventRecord, ParseSummary, ProfileDefinition


def load_profile(selector: str):
    """Get a built-in profile by id, or load a profile definition file."""
    profile = get_builtin_profile(selector)
    if profile is not None:
        return profile
    path = Path(selector)
    if path.suffix.lower() == ".json" and path.exists():
        definition = ProfileDefinition.model_validate_json(path.read_text(encoding="utf-8"))
        return definition.to_profile(editable=False)
    return None


def main() -> int:
    logger = setup_logging()
    
    if len(sys.argv) < 2:
        print(__doc__.strip(), file=sys.stderr)
        print("\nBuilt-in profiles:", file=sys.stderr)
        for p in list_builtin_profiles():
            print(f"  {p.profile_id:<20} {p.name}", file=sys.stderr)
        return 2
    
    source = Path(sys.argv[1])
    selector = sys.argv[2] if len(sys.argv) > 2 else settings.default_profile_id
    zone = sys.argv[3] if len(sys.argv) > 3 else None
    
    try:
        profile = load_profile(selector)
    except (OSError, ValidationError, MalformedProfileError) as e:
        logger.error(f"Invalid profile {selector}: {e}")
        return 2
    if profile is None:
        logger.error(f"Unknown profile: {selector}")
        return 2
    
    try:
        event_format = EventFormat(profile, zone=zone)
    except ValueError as e:
        logger.error(str(e))
        return 2
    summary = ParseSummary(source=str(source), profile_id=profile.profile_id)
    
    try:
        parser = event_format.open(source)
    except OSError as e:
        logger.error(f"Cannot read {source}: {e}")
        return 2
    
    try:
        with parser:
            for event in parser:
                print(EventRecord.from_event(event).model_dump_json())
                summary.events += 1
    except ParsingAbortedError as e:
        summary.aborted = True
        summary.error = str(e)
    finally:
        summary.lines_read = parser.line_count
        summary.chars_read = parser.progress
    
    print(summary.model_dump_json(indent=2), file=sys.stderr)
    return 1 if summary.aborted else 0


if __name__ == "__main__":
    sys.exit(main())
