"""Tests for zone, anchor, settings and logging helpers."""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from dateutil import tz

from eventparse.core.config import Settings
from eventparse.core.logging import get_logger, setup_logging
from eventparse.core.time import (
    EPOCH,
    from_epoch,
    offset_zone,
    resolve_anchor,
    resolve_zone,
    to_utc_iso,
)


class TestResolveZone:
    """Test zone name resolution."""

    @pytest.mark.parametrize("name", ["UTC", "utc", "Z", "GMT"])
    def test_utc_aliases(self, name):
        """Test names that mean UTC."""
        assert resolve_zone(name) is tz.UTC

    def test_iana_name(self):
        """Test IANA zone names."""
        zone = resolve_zone("Europe/Paris")
        assert datetime(2024, 7, 1, tzinfo=zone).utcoffset() == timedelta(hours=2)

    def test_tzinfo_passthrough(self):
        """Test tzinfo objects are returned as is."""
        zone = tz.tzoffset(None, 3600)
        assert resolve_zone(zone) is zone

    @pytest.mark.parametrize("name", ["", "Not/AZone"])
    def test_unknown_zone(self, name):
        """Test unknown zone."""
        with pytest.raises(ValueError):
            resolve_zone(name)

    def test_offset_zone(self):
        """Test fixed-offset zones."""
        assert offset_zone(0) is tz.UTC
        assert datetime(2024, 1, 1, tzinfo=offset_zone(-3600)).utcoffset() == timedelta(hours=-1)


class TestResolveAnchor:
    """Test temporal anchor resolution."""

    NOW = datetime(2024, 3, 10, 23, 30, 15, tzinfo=timezone.utc)

    def test_epoch(self):
        """Test the epoch keyword."""
        assert resolve_anchor("epoch", tz.UTC) == EPOCH

    def test_now_in_zone(self):
        """Test "now" is the current wall time in the zone."""
        anchor = resolve_anchor("now", resolve_zone("Europe/Paris"), now=self.NOW)
        assert anchor == datetime(2024, 3, 11, 0, 30, 15)
        assert anchor.tzinfo is None

    def test_today_truncates_time(self):
        """Test "today" is midnight of the current day."""
        assert resolve_anchor("TODAY", tz.UTC, now=self.NOW) == datetime(2024, 3, 10)

    def test_date_string(self):
        """Test anchors given as date strings."""
        assert resolve_anchor("2005-06-01", tz.UTC) == datetime(2005, 6, 1)

    def test_aware_datetime_converted_to_zone(self):
        """Test aware datetime converted to zone."""
        anchor = resolve_anchor(self.NOW, resolve_zone("Europe/Paris"))
        assert anchor == datetime(2024, 3, 11, 0, 30, 15)

    def test_naive_datetime_kept(self):
        """Test naive datetime kept."""
        assert resolve_anchor(datetime(2001, 2, 3, 4), tz.UTC) == datetime(2001, 2, 3, 4)

    def test_invalid_string(self):
        """Test unparseable anchors are rejected."""
        with pytest.raises(ValueError):
            resolve_anchor("not a date at all", tz.UTC)


class TestEpochHelpers:
    """Test epoch conversion and formatting."""

    def test_from_epoch(self):
        """Test epoch seconds and microseconds to datetime."""
        result = from_epoch(86400, 1500, tz.UTC)
        assert result == datetime(1970, 1, 2, 0, 0, 0, 1500, tzinfo=timezone.utc)

    def test_to_utc_iso(self):
        """Test UTC ISO formatting of aware datetimes."""
        dt = datetime(2024, 1, 2, 3, 4, 5, 678900, tzinfo=offset_zone(7200))
        assert to_utc_iso(dt) == "2024-01-02T01:04:05.678Z"

    def test_to_utc_iso_naive(self):
        """Test naive datetimes are formatted as UTC."""
        assert to_utc_iso(datetime(2024, 1, 2)) == "2024-01-02T00:00:00.000Z"


class TestSettings:
    """Test environment overrides."""

    def test_defaults(self, monkeypatch):
        """Test default settings values."""
        monkeypatch.delenv("EVENTPARSE_DEFAULT_ZONE", raising=False)
        current = Settings(_env_file=None)
        assert current.default_zone == "UTC"
        assert current.temporal_anchor == "epoch"
        assert current.progress_step_chars == 10240

    def test_env_prefix(self, monkeypatch):
        """Test EVENTPARSE_ environment overrides."""
        monkeypatch.setenv("EVENTPARSE_DEFAULT_ZONE", "Europe/Paris")
        monkeypatch.setenv("EVENTPARSE_PROGRESS_STEP_CHARS", "512")
        current = Settings(_env_file=None)
        assert current.default_zone == "Europe/Paris"
        assert current.progress_step_chars == 512


class TestLogging:
    """Test logger naming and setup."""

    def test_loggers_live_under_package(self):
        """Test logger names get the package prefix once."""
        assert get_logger("parsers.profile").name == "eventparse.parsers.profile"
        assert get_logger("eventparse.parsers.capture").name == "eventparse.parsers.capture"

    def test_setup_logging_level(self):
        """Test setup_logging sets the root level."""
        root = logging.getLogger()
        previous_level, previous_handlers = root.level, root.handlers[:]
        try:
            logger = setup_logging("DEBUG")
            assert logger.name == "eventparse"
            assert root.level == logging.DEBUG
        finally:
            root.handlers[:] = previous_handlers
            root.setLevel(previous_level)
