"""Tests for the built-in profile catalog."""

import io
from datetime import datetime, timedelta, timezone

import pytest

from eventparse.parsers.catalog import (
    BUILTIN_ISO,
    BUILTIN_ISO_8601,
    BUILTIN_ISO_STRICT,
    BUILTIN_JVM_UL,
    BUILTIN_SYSLOG,
    get_builtin_profile,
    list_builtin_profiles,
    resolve_profile,
)
from eventparse.parsers.event_format import EventFormat
from eventparse.parsers.profile import ParsingProfile


ISO_LINES = [
    ("[2020/07/21-02:56:42.460] [info] Hello World!", True, False),
    ("[2020-11-13 19:59:22.627] [INFO ] Hello world!", True, True),
    ("[2020-11-13 19:59:22] [INFO ] Hello world!", True, False),
    ("[2020-11-13 19:59:22.627] [FOO  ] Hello world!", True, False),
    ("[2020-11-13 19:59:22.627] Hello world!", True, False),
    ("Hello world!", False, False),
]

JVM_LINES = [
    "[54.144s][info][gc,phases      ] GC(59)   Other: 0.1ms",
    "[54.151s][info][gc             ] GC(59) Pause Young (Normal) (G1 Evacuation Pause) 223M->108M(256M) 7.446ms",
    "[54.151s][info][gc,cpu         ] GC(59) User=0.03s Sys=0.00s Real=0.01s",
]


def parse(profile, line, **kwargs):
    return EventFormat(profile, zone="UTC", **kwargs).parse_line(line)


class TestCatalog:
    """Test catalog lookups."""

    def test_all_builtins_frozen(self):
        """Test every built-in profile is frozen and compiles."""
        profiles = list_builtin_profiles()
        assert len(profiles) == 5
        assert len({p.profile_id for p in profiles}) == 5
        for profile in profiles:
            assert profile.is_built_in
            assert not profile.is_editable
            assert profile.pattern is not None

    def test_lookup_normalizes_id(self):
        """Test ids are trimmed and upper-cased before lookup."""
        assert get_builtin_profile(" builtin_iso ") is BUILTIN_ISO
        assert get_builtin_profile("BUILTIN_SYSLOG") is BUILTIN_SYSLOG

    def test_lookup_unknown(self):
        """Test unknown ids return None."""
        assert get_builtin_profile("NOPE") is None
        assert get_builtin_profile("") is None

    def test_resolve_user_profile(self):
        """Test user profiles are found after the built-ins."""
        mine = ParsingProfile("Mine", {"MSG": ".*"}, "$MSG", profile_id="mine-1", editable=True)
        assert resolve_profile("mine-1", [mine]) is mine
        assert resolve_profile("BUILTIN_JVM_UL", [mine]) is BUILTIN_JVM_UL
        assert resolve_profile("other", [mine]) is None


class TestIsoProfiles:
    """Test the ISO-like profiles."""

    def test_iso_event(self):
        """Test the ISO-like profile on a full line."""
        event = parse(BUILTIN_ISO, "[2023-05-01 10:20:30.123] [INFO] hello")
        assert event.sequence == -1
        assert event.timestamp == datetime(2023, 5, 1, 10, 20, 30, 123000, tzinfo=timezone.utc)
        assert dict(event.fields) == {"SEVERITY": "INFO"}
        assert event.text == "[2023-05-01 10:20:30.123] [INFO] hello"

    @pytest.mark.parametrize("line,lenient,strict", ISO_LINES)
    def test_lenient_and_strict_matching(self, line, lenient, strict):
        """Test which lines the lenient and strict ISO profiles accept."""
        assert (parse(BUILTIN_ISO, line) is not None) is lenient
        assert (parse(BUILTIN_ISO_STRICT, line) is not None) is strict

    def test_lenient_without_fraction_or_severity(self):
        """Test lenient without fraction or severity."""
        event = parse(BUILTIN_ISO, "[2020/07/21-02:56:42] plain text")
        assert event.timestamp == datetime(2020, 7, 21, 2, 56, 42, tzinfo=timezone.utc)
        assert dict(event.fields) == {}

    def test_iso_8601_with_offset(self):
        """Test a numeric offset sets the event zone."""
        event = parse(BUILTIN_ISO_8601, "2024-01-02T03:04:05.250+02:00 WARN disk almost full")
        assert event.timestamp.utcoffset() == timedelta(hours=2)
        assert event.timestamp == datetime(2024, 1, 2, 1, 4, 5, 250000, tzinfo=timezone.utc)
        assert event.fields["SEVERITY"] == "WARN"

    def test_iso_8601_zulu(self):
        """Test a Z suffix means UTC."""
        event = parse(BUILTIN_ISO_8601, "2024-01-02T03:04:05Z")
        assert event.timestamp == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_iso_8601_without_offset_uses_zone(self):
        """Test the format zone applies when no offset is captured."""
        event = EventFormat(BUILTIN_ISO_8601, zone="Europe/Paris").parse_line("2024-07-01 12:00:00 info up")
        assert event.timestamp == datetime(2024, 7, 1, 10, 0, 0, tzinfo=timezone.utc)


class TestSyslogProfile:
    """Test the syslog profile."""

    def test_syslog_event(self):
        """Test a syslog line with host, process and pid."""
        line = "Jun 14 15:16:01 combo sshd(pam_unix)[19939]: authentication failure; logname= uid=0"
        event = parse(BUILTIN_SYSLOG, line, anchor="2005-01-01")
        assert event.timestamp == datetime(2005, 6, 14, 15, 16, 1, tzinfo=timezone.utc)
        assert dict(event.fields) == {"HOST": "combo", "PROCESS": "sshd(pam_unix)", "PID": "19939"}

    def test_leap_day_without_captured_year(self):
        """Test Feb 29 lines stay separate events when the year comes from the anchor."""
        data = b"Feb 28 10:00:00 host app[1]: a\nFeb 29 10:00:00 host app[1]: b\n"
        events = list(EventFormat(BUILTIN_SYSLOG, zone="UTC").parse(io.BytesIO(data)))
        assert [e.text for e in events] == [
            "Feb 28 10:00:00 host app[1]: a",
            "Feb 29 10:00:00 host app[1]: b",
        ]
        assert events[0].timestamp == datetime(1970, 2, 28, 10, 0, 0, tzinfo=timezone.utc)
        assert events[1].timestamp == datetime(1968, 2, 29, 10, 0, 0, tzinfo=timezone.utc)

    def test_leap_day_in_leap_anchor_year(self):
        """Test Feb 29 keeps the anchor year when that year is a leap year."""
        event = parse(BUILTIN_SYSLOG, "Feb 29 10:00:00 host app: b", anchor="2024-06-01")
        assert event.timestamp == datetime(2024, 2, 29, 10, 0, 0, tzinfo=timezone.utc)

    def test_syslog_without_pid(self):
        """Test a syslog line without a pid."""
        event = parse(BUILTIN_SYSLOG, "Jul  1 09:00:00 combo kernel: eth0 up", anchor="2005-01-01")
        assert event.timestamp == datetime(2005, 7, 1, 9, 0, 0, tzinfo=timezone.utc)
        assert "PID" not in event.fields
        assert event.fields["PROCESS"] == "kernel"


class TestJvmProfile:
    """Test the JVM unified logging profile."""

    @pytest.mark.parametrize("line", JVM_LINES)
    def test_matches(self, line):
        """Test JVM unified logging lines match."""
        assert parse(BUILTIN_JVM_UL, line) is not None

    def test_uptime_timestamp(self):
        """Test uptime is read as seconds since the epoch."""
        event = parse(BUILTIN_JVM_UL, JVM_LINES[0])
        assert event.timestamp == datetime(1970, 1, 1, 0, 0, 54, 144000, tzinfo=timezone.utc)
        assert dict(event.fields) == {"SEVERITY": "info", "TAGS": "gc,phases"}

    def test_iso_line_does_not_match(self):
        """Test ISO lines are not mistaken for JVM lines."""
        assert parse(BUILTIN_JVM_UL, ISO_LINES[1][0]) is None
