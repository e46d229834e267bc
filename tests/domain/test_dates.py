"""Tests for event date parsing, ordering, and display."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from storyteller.domain.dates import (
    DateParseOptions,
    DateValue,
    ParsedEventDate,
    chronological_key,
    days_from_civil,
    infer_precision,
    is_leap_year,
    parse_event_date,
    to_display,
    to_millis,
)
from storyteller.domain.types import DatePrecision

# ---------------------------------------------------------------------------
# Calendar arithmetic
# ---------------------------------------------------------------------------


class TestCalendar:
    @pytest.mark.parametrize(
        ("year", "expected"),
        [(2024, True), (2023, False), (1900, False), (2000, True), (0, True), (-100, False), (-400, True)],
    )
    def test_leap_years(self, year: int, expected: bool) -> None:
        assert is_leap_year(year) is expected

    def test_days_from_civil_matches_stdlib(self) -> None:
        epoch = date(1970, 1, 1)
        for d in (date(1970, 1, 1), date(2000, 3, 1), date(1, 1, 1), date(9999, 12, 31), date(1969, 12, 31)):
            assert days_from_civil(d.year, d.month, d.day) == (d - epoch).days

    def test_year_zero_follows_year_minus_one(self) -> None:
        assert days_from_civil(0, 1, 1) - days_from_civil(-1, 12, 31) == 1
        assert days_from_civil(1, 1, 1) - days_from_civil(0, 12, 31) == 1


class TestDateValue:
    def test_rejects_day_past_month_end(self) -> None:
        with pytest.raises(ValidationError):
            DateValue(year=2023, month=2, day=29)

    def test_leap_day_accepted(self) -> None:
        assert DateValue(year=2024, month=2, day=29).day == 29

    def test_weekday(self) -> None:
        assert DateValue(year=1970, month=1, day=1).weekday == 3
        assert DateValue(year=2024, month=3, day=2).weekday == date(2024, 3, 2).weekday()

    def test_to_millis_with_offset(self) -> None:
        value = DateValue(year=2024, month=3, day=15, hour=10, minute=30, offset_minutes=60)
        expected = datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc).timestamp() * 1000
        assert value.to_millis() == int(expected)

    def test_from_aware_datetime_keeps_offset(self) -> None:
        aware = datetime(2024, 3, 15, 10, 30, tzinfo=timezone(timedelta(hours=-5)))
        value = DateValue.from_datetime(aware, offset_minutes=120)
        assert value.offset_minutes == -300
        assert value.to_millis() == int(aware.timestamp() * 1000)

    def test_frozen(self) -> None:
        value = DateValue(year=2024)
        with pytest.raises(ValidationError):
            value.year = 2025  # type: ignore[misc]


class TestParsedEventDate:
    def test_requires_exactly_one_outcome(self) -> None:
        with pytest.raises(ValidationError):
            ParsedEventDate()
        with pytest.raises(ValidationError):
            ParsedEventDate(start=DateValue(year=1), error="empty")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParseIso:
    def test_calendar_date(self) -> None:
        parsed = parse_event_date("2024-03-15")
        assert parsed.ok
        assert parsed.start == DateValue(year=2024, month=3, day=15)
        assert parsed.precision is DatePrecision.DAY
        assert not parsed.is_bce

    def test_year_month(self) -> None:
        parsed = parse_event_date("2024-03")
        assert parsed.start == DateValue(year=2024, month=3)
        assert parsed.precision is DatePrecision.MONTH

    def test_year_only(self) -> None:
        parsed = parse_event_date("1200")
        assert parsed.start == DateValue(year=1200)
        assert parsed.precision is DatePrecision.YEAR

    def test_basic_format(self) -> None:
        assert parse_event_date("20240315").start == DateValue(year=2024, month=3, day=15)

    def test_ordinal_date(self) -> None:
        assert parse_event_date("2024-060").start == DateValue(year=2024, month=2, day=29)

    def test_time_with_utc(self) -> None:
        parsed = parse_event_date("2024-03-15T10:30:00Z")
        assert parsed.precision is DatePrecision.TIME
        assert to_millis(parsed) == 1_710_498_600_000

    def test_time_with_offset(self) -> None:
        parsed = parse_event_date("2024-03-15T10:30:00+05:30")
        assert parsed.start is not None
        assert parsed.start.offset_minutes == 330
        assert to_millis(parsed) == 1_710_498_600_000 - 330 * 60_000

    def test_fractional_seconds(self) -> None:
        parsed = parse_event_date("2024-03-15T10:30:00.25Z")
        assert parsed.start is not None
        assert parsed.start.millisecond == 250

    def test_expanded_negative_year(self) -> None:
        parsed = parse_event_date("-000499-03-01")
        assert parsed.start == DateValue(year=-499, month=3, day=1)

    def test_invalid_calendar_date_unparsed(self) -> None:
        assert parse_event_date("2023-02-30").error == "unparsed"

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("2024-W10-1", (2024, 3, 4)),
            ("2024W101", (2024, 3, 4)),
            ("2024-W10", (2024, 3, 4)),
            ("2024-W09-5", (2024, 3, 1)),
            ("2020-W53-5", (2021, 1, 1)),
            ("2025-W01-1", (2024, 12, 30)),
        ],
    )
    def test_week_date(self, text: str, expected: tuple[int, int, int]) -> None:
        parsed = parse_event_date(text)
        assert parsed.start is not None
        assert (parsed.start.year, parsed.start.month, parsed.start.day) == expected
        assert parsed.precision is DatePrecision.DAY

    @pytest.mark.parametrize("text", ["2024-W53-1", "2024-W00", "2024-W10-8"])
    def test_invalid_week_date_unparsed(self, text: str, reference_date: datetime) -> None:
        assert parse_event_date(text, DateParseOptions(reference_date=reference_date)).error == "unparsed"

    def test_week_date_with_time(self) -> None:
        parsed = parse_event_date("2024-W10-1T09:15Z")
        assert parsed.start == DateValue(year=2024, month=3, day=4, hour=9, minute=15)


class TestParseSql:
    def test_date_time(self) -> None:
        parsed = parse_event_date("2024-03-15 10:30")
        assert parsed.start == DateValue(year=2024, month=3, day=15, hour=10, minute=30)

    def test_seconds_and_millis(self) -> None:
        parsed = parse_event_date("2024-03-15 10:30:05.123")
        assert parsed.start is not None
        assert (parsed.start.second, parsed.start.millisecond) == (5, 123)


class TestTimezones:
    def test_named_zone_applies_dst(self) -> None:
        parsed = parse_event_date("2024-07-04", DateParseOptions(timezone="America/New_York"))
        assert parsed.start is not None
        assert parsed.start.offset_minutes == -240
        assert to_millis(parsed) == 1_720_065_600_000

    def test_fixed_offset_string(self) -> None:
        parsed = parse_event_date("2024-01-01", DateParseOptions(timezone="+02:00"))
        assert parsed.start is not None
        assert parsed.start.offset_minutes == 120

    def test_minutes_offset(self) -> None:
        parsed = parse_event_date("2024-01-01", DateParseOptions(timezone=-90))
        assert parsed.start is not None
        assert parsed.start.offset_minutes == -90

    def test_text_offset_beats_option(self) -> None:
        parsed = parse_event_date("2024-01-01T00:00Z", DateParseOptions(timezone="Asia/Tokyo"))
        assert parsed.start is not None
        assert parsed.start.offset_minutes == 0

    def test_unknown_zone_falls_back_to_utc(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="storyteller.domain.dates"):
            parsed = parse_event_date("2024-01-01", DateParseOptions(timezone="Mars/Olympus"))
        assert parsed.start is not None
        assert parsed.start.offset_minutes == 0
        assert "Unknown timezone" in caplog.text

    def test_zone_for_ancient_date(self) -> None:
        parsed = parse_event_date("500 BCE", DateParseOptions(timezone="UTC"))
        assert parsed.start is not None
        assert parsed.start.offset_minutes == 0

    def test_local_mean_time_rounds_to_nearest_minute(self) -> None:
        # New York local mean time is -4:56:02.
        parsed = parse_event_date("44 BC", DateParseOptions(timezone="America/New_York"))
        assert parsed.start is not None
        assert parsed.start.offset_minutes == -296


class TestParseEra:
    def test_bce_year(self) -> None:
        parsed = parse_event_date("500 BCE")
        assert parsed.start == DateValue(year=-499)
        assert parsed.is_bce
        assert parsed.original_year == 500
        assert parsed.precision is DatePrecision.YEAR

    def test_bc_year_astronomical(self) -> None:
        parsed = parse_event_date("2000 BC")
        assert parsed.start is not None
        assert parsed.start.year == -1999

    def test_one_bce_is_year_zero(self) -> None:
        parsed = parse_event_date("1 BC")
        assert parsed.start is not None
        assert parsed.start.year == 0

    def test_day_month_year_bce(self) -> None:
        parsed = parse_event_date("23 Mar 44 BCE")
        assert parsed.start == DateValue(year=-43, month=3, day=23)
        assert parsed.precision is DatePrecision.DAY
        assert parsed.original_year == 44

    def test_month_day_year_bce(self) -> None:
        parsed = parse_event_date("March 15, 500 BCE")
        assert parsed.start == DateValue(year=-499, month=3, day=15)

    def test_month_year_bce(self) -> None:
        parsed = parse_event_date("Mar 500 BCE")
        assert parsed.start == DateValue(year=-499, month=3)
        assert parsed.precision is DatePrecision.MONTH

    @pytest.mark.parametrize("text", ["500 B.C.", "500 B.C.E.", "500 bce", "500BC"])
    def test_era_spellings(self, text: str) -> None:
        parsed = parse_event_date(text)
        assert parsed.start is not None
        assert parsed.start.year == -499

    def test_ad_prefix(self) -> None:
        parsed = parse_event_date("AD 79")
        assert parsed.start == DateValue(year=79)
        assert not parsed.is_bce
        assert parsed.original_year is None

    def test_ce_suffix(self) -> None:
        parsed = parse_event_date("79 CE")
        assert parsed.start == DateValue(year=79)

    def test_zero_bc_unparsed(self) -> None:
        assert parse_event_date("0 BC").error == "unparsed"

    def test_unknown_month_unparsed(self) -> None:
        assert parse_event_date("23 Foo 44 BCE").error == "unparsed"


class TestParseFallback:
    def test_month_name_day_year(self) -> None:
        assert parse_event_date("Mar 05 2024").start == DateValue(year=2024, month=3, day=5)

    def test_full_month_name_with_comma(self) -> None:
        assert parse_event_date("March 05, 2024").start == DateValue(year=2024, month=3, day=5)

    def test_single_digit_month(self) -> None:
        assert parse_event_date("2024-3").start == DateValue(year=2024, month=3)

    def test_short_year_needs_era(self) -> None:
        assert parse_event_date("44").error == "unparsed"
        assert parse_event_date("Mar 05 44").error == "unparsed"
        assert parse_event_date("AD 44").start == DateValue(year=44)


class TestApproximate:
    @pytest.mark.parametrize("text", ["circa 1200", "~1200", "around 1200", "approx. 1200", "About 1200"])
    def test_qualifiers(self, text: str) -> None:
        parsed = parse_event_date(text)
        assert parsed.approximate
        assert parsed.start == DateValue(year=1200)

    def test_approximate_bce(self) -> None:
        parsed = parse_event_date("circa 500 BCE")
        assert parsed.approximate
        assert parsed.is_bce

    def test_plain_date_not_approximate(self) -> None:
        assert not parse_event_date("1200").approximate

    def test_qualifier_only_unparsed(self) -> None:
        parsed = parse_event_date("circa")
        assert parsed.error == "unparsed"


class TestParseRelative:
    def test_tomorrow(self, reference_date: datetime) -> None:
        parsed = parse_event_date("tomorrow", DateParseOptions(reference_date=reference_date))
        assert parsed.start is not None
        assert (parsed.start.year, parsed.start.month, parsed.start.day) == (2024, 3, 2)

    def test_in_days(self, reference_date: datetime) -> None:
        parsed = parse_event_date("in 3 days", DateParseOptions(reference_date=reference_date))
        assert parsed.start is not None
        assert (parsed.start.year, parsed.start.month, parsed.start.day) == (2024, 3, 4)

    def test_days_ago_from_date_reference(self) -> None:
        options = DateParseOptions(reference_date=date(2024, 3, 10))
        parsed = parse_event_date("2 days ago", options)
        assert parsed.start is not None
        assert (parsed.start.month, parsed.start.day) == (3, 8)

    def test_without_reference_date_unparsed(self) -> None:
        assert parse_event_date("tomorrow").error == "unparsed"
        assert parse_event_date("next friday").error == "unparsed"


class TestParseWeekday:
    """The reference date, 2024-03-01, is a Friday."""

    @staticmethod
    def _day(text: str, reference: datetime, *, forward: bool = False) -> tuple[int, int, int]:
        options = DateParseOptions(reference_date=reference, forward_date=forward)
        parsed = parse_event_date(text, options)
        assert parsed.start is not None
        return parsed.start.year, parsed.start.month, parsed.start.day

    def test_next_weekday(self, reference_date: datetime) -> None:
        assert self._day("next friday", reference_date) == (2024, 3, 8)
        assert self._day("next monday", reference_date) == (2024, 3, 4)

    def test_last_weekday(self, reference_date: datetime) -> None:
        assert self._day("last monday", reference_date) == (2024, 2, 26)
        assert self._day("last friday", reference_date) == (2024, 2, 23)

    def test_this_weekday(self, reference_date: datetime) -> None:
        assert self._day("this sunday", reference_date) == (2024, 3, 3)
        assert self._day("this Mon", reference_date) == (2024, 2, 26)

    def test_bare_weekday_follows_forward_date(self, reference_date: datetime) -> None:
        assert self._day("friday", reference_date) == (2024, 3, 1)
        assert self._day("friday", reference_date, forward=True) == (2024, 3, 8)
        assert self._day("wednesday", reference_date) == (2024, 2, 28)
        assert self._day("wednesday", reference_date, forward=True) == (2024, 3, 6)

    def test_weekday_uses_timezone(self, reference_date: datetime) -> None:
        options = DateParseOptions(reference_date=reference_date, timezone="Asia/Tokyo")
        parsed = parse_event_date("next friday", options)
        assert parsed.start is not None
        assert parsed.start.offset_minutes == 540
        assert parsed.precision is DatePrecision.DAY


class TestParseErrors:
    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty(self, text: str | None) -> None:
        parsed = parse_event_date(text)
        assert parsed.error == "empty"
        assert parsed.start is None
        assert not parsed.ok

    def test_unparsed(self) -> None:
        parsed = parse_event_date("sometime later")
        assert parsed.error == "unparsed"
        assert to_millis(parsed) is None

    def test_non_string_rejected(self) -> None:
        with pytest.raises(TypeError, match="string"):
            parse_event_date(2024)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_millis_increase_across_era_boundary(self) -> None:
        texts = ["500 BCE", "23 Mar 44 BCE", "1 BC", "AD 79", "1200", "2024-03-15"]
        values = [to_millis(parse_event_date(t)) for t in texts]
        assert values == sorted(values)

    def test_bce_before_ce(self) -> None:
        bce = to_millis(parse_event_date("100 BCE"))
        ce = to_millis(parse_event_date("100 CE"))
        assert bce is not None
        assert ce is not None
        assert bce < ce

    def test_bce_millis_negative(self) -> None:
        value = to_millis(parse_event_date("500 BCE"))
        assert value is not None
        assert value < 0

    def test_chronological_key_puts_failures_last(self) -> None:
        entries = [parse_event_date(t) for t in ["2024", "", "500 BCE", "nonsense", "1200"]]
        ordered = sorted(entries, key=chronological_key)
        assert [e.ok for e in ordered] == [True, True, True, False, False]
        assert ordered[0].is_bce

    def test_to_millis_none(self) -> None:
        assert to_millis(None) is None


class TestInferPrecision:
    def test_january_first_reads_as_year(self) -> None:
        assert infer_precision(DateValue(year=2024, month=1, day=1)) is DatePrecision.YEAR

    def test_midnight_with_seconds_is_time(self) -> None:
        assert infer_precision(DateValue(year=2024, second=1)) is DatePrecision.TIME


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------


class TestToDisplay:
    def test_bce_year(self) -> None:
        assert to_display(parse_event_date("500 BCE")) == "500 BCE"

    def test_bce_day(self) -> None:
        assert to_display(parse_event_date("23 Mar 44 BCE")) == "Mar 23, 44 BCE"

    def test_bce_month(self) -> None:
        assert to_display(parse_event_date("Mar 500 BCE")) == "Mar 500 BCE"

    def test_bce_time_from_date_value(self) -> None:
        value = DateValue(year=-43, month=3, day=23, hour=14, minute=30)
        assert to_display(value, is_bce=True, original_year=44) == "Mar 23, 44 BCE, 2:30 PM"

    def test_bce_year_derived_without_original(self) -> None:
        assert to_display(DateValue(year=-499), is_bce=True) == "500 BCE"

    def test_medium_format(self) -> None:
        assert to_display(parse_event_date("2024-03-02")) == "Sat, Mar 2, 2024, 12:00 AM"

    def test_medium_format_afternoon(self) -> None:
        parsed = parse_event_date("2024-03-02 15:05")
        assert to_display(parsed, "en-US") == "Sat, Mar 2, 2024, 3:05 PM"

    def test_day_first_locale(self) -> None:
        assert to_display(parse_event_date("2024-03-02"), "en-GB") == "Sat, 2 Mar 2024, 00:00"

    def test_failed_parse_is_blank(self) -> None:
        assert to_display(parse_event_date("")) == ""
        assert to_display(None) == ""
