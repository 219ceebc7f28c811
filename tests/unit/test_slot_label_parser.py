"""Tests for SlotLabelParser."""

from datetime import date, datetime, timedelta, timezone

import pytest

from callbooker.services.scheduling.slot_label_parser import SlotLabelParser


@pytest.fixture
def parser():
    return SlotLabelParser(reference_date=date(2025, 1, 1))


class TestIsoLabels:
    def test_utc_designator(self, parser):
        parsed = parser.parse("2025-01-06T10:00:00Z", "Asia/Kolkata")
        assert parsed == datetime(2025, 1, 6, 10, 0, tzinfo=timezone.utc)

    def test_explicit_offset_is_kept(self, parser):
        parsed = parser.parse("2025-01-06T10:00:00+05:30", "UTC")
        assert parsed.utcoffset() == timedelta(hours=5, minutes=30)

    def test_naive_iso_uses_expert_timezone(self, parser):
        parsed = parser.parse("2025-01-06T10:00:00", "Asia/Kolkata")
        assert parsed.astimezone(timezone.utc) == datetime(2025, 1, 6, 4, 30, tzinfo=timezone.utc)


class TestDisplayLabels:
    @pytest.mark.parametrize(
        "label",
        [
            "Mon, 06 Jan 2025 10:00 AM",
            "Mon 6 Jan 2025 10:00 am",
            "6 Jan 2025 10:00",
            "6th January 2025 10:00 AM",
            "Mon 6 Jan · 10:00 AM",
            "Mon, 6 Jan 10:00am",
            "6 Jan at 10:00 a.m.",
        ],
    )
    def test_formats(self, parser, label):
        parsed = parser.parse(label, "UTC")
        assert parsed == datetime(2025, 1, 6, 10, 0, tzinfo=timezone.utc)

    def test_afternoon(self, parser):
        parsed = parser.parse("Mon 6 Jan 2025 03:30 PM", "UTC")
        assert (parsed.hour, parsed.minute) == (15, 30)

    def test_label_localized_to_expert_timezone(self, parser):
        parsed = parser.parse("Mon 6 Jan 2025 09:00 AM", "America/New_York")
        assert parsed.astimezone(timezone.utc).hour == 14


class TestYearInference:
    def test_year_rolls_over_near_new_year(self):
        parser = SlotLabelParser(reference_date=date(2025, 12, 30))
        parsed = parser.parse("Fri 2 Jan 09:00 AM", "UTC")
        assert parsed.year == 2026

    def test_yesterday_stays_in_current_year(self):
        parser = SlotLabelParser(reference_date=date(2025, 6, 15))
        parsed = parser.parse("14 Jun 09:00", "UTC")
        assert parsed.date() == date(2025, 6, 14)

    def test_leap_day_in_non_leap_year(self):
        parser = SlotLabelParser(reference_date=date(2025, 2, 1))
        assert parser.parse("29 Feb 10:00", "UTC") is None


class TestUnparseable:
    @pytest.mark.parametrize("label", ["", "   ", "whenever", "10:00", "Next Monday morning"])
    def test_returns_none(self, parser, label):
        assert parser.parse(label, "UTC") is None
