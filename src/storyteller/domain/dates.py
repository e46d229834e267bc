"""Event date parsing — free-form text to a sortable date value.

Parse order, first success wins:

1. ISO-8601 (calendar, ordinal and week dates, optional time and
   offset).
2. SQL-style ``YYYY-MM-DD HH:MM[:SS[.fff]]``.
3. Era forms when a BC/BCE/AD/CE token is present (``500 BCE``,
   ``23 Mar 44 BC``, ``March 15, 500 BCE``, ``AD 79``).
4. Short fallbacks with four-digit years (``yyyy-M``, ``Mar 05 2024``,
   ``March 05, 2024``).
5. Weekday expressions (``friday``, ``next friday``, ``last monday``,
   ``this sunday``), then other relative expressions (``tomorrow``,
   ``in 3 days``). Both need an explicit reference date.

Weekday expressions count from the reference day: ``next`` is the
first matching day strictly after it, ``last`` the last one strictly
before it, ``this`` the matching day of its Monday-to-Sunday week. A
bare weekday means ``next`` when ``forward_date`` is set and ``this``
otherwise.

Years with fewer than four digits need an era token (``AD 44``); a bare
``44`` is unparsed rather than read as the year 44.

Years use astronomical numbering so that one integer axis orders dates
across the era boundary: 1 BCE is year 0, 500 BCE is year -499. Python's
``datetime`` stops at year 1, so :class:`DateValue` carries its own
epoch arithmetic.

INVARIANT: No function here reads the system clock. Relative
expressions are only attempted when a reference date is supplied.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import dateparser
from pydantic import BaseModel, Field, ValidationError, model_validator

from storyteller.domain.types import DatePrecision

logger = logging.getLogger(__name__)

_MS_PER_DAY = 86_400_000

MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
MONTH_ABBREVIATIONS: tuple[str, ...] = tuple(name[:3] for name in MONTH_NAMES)
WEEKDAY_NAMES: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
WEEKDAY_ABBREVIATIONS: tuple[str, ...] = tuple(name[:3] for name in WEEKDAY_NAMES)

_MONTH_LOOKUP: dict[str, int] = {
    **{name.lower(): i for i, name in enumerate(MONTH_NAMES, start=1)},
    **{abbr.lower(): i for i, abbr in enumerate(MONTH_ABBREVIATIONS, start=1)},
    "sept": 9,
}
_WEEKDAY_LOOKUP: dict[str, int] = {
    **{name.lower(): i for i, name in enumerate(WEEKDAY_NAMES)},
    **{abbr.lower(): i for i, abbr in enumerate(WEEKDAY_ABBREVIATIONS)},
    "tues": 1,
    "thur": 3,
    "thurs": 3,
}

# ---------------------------------------------------------------------------
# Calendar arithmetic (proleptic Gregorian, astronomical years)
# ---------------------------------------------------------------------------


def is_leap_year(year: int) -> bool:
    """Leap-year rule, valid for zero and negative astronomical years."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    if month == 2:
        return 29 if is_leap_year(year) else 28
    return 30 if month in (4, 6, 9, 11) else 31


def days_from_civil(year: int, month: int, day: int) -> int:
    """Days since 1970-01-01 for a proleptic Gregorian date.

    Floor division keeps the result exact for years at or below zero.
    """
    y = year - 1 if month <= 2 else year
    era = y // 400
    yoe = y - era * 400
    mp = (month + 9) % 12
    doy = (153 * mp + 2) // 5 + day - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146_097 + doe - 719_468


def civil_from_days(days: int) -> tuple[int, int, int]:
    """Inverse of :func:`days_from_civil`: ``(year, month, day)``."""
    z = days + 719_468
    era = z // 146_097
    doe = z - era * 146_097
    yoe = (doe - doe // 1460 + doe // 36_524 - doe // 146_096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def _weekday_of(days: int) -> int:
    return (days + 3) % 7


def iso_week_start(year: int) -> int:
    """Epoch day of the Monday that opens ISO week 1 of *year*.

    Week 1 is the week holding January 4th.
    """
    jan4 = days_from_civil(year, 1, 4)
    return jan4 - _weekday_of(jan4)


def iso_weeks_in_year(year: int) -> int:
    return (iso_week_start(year + 1) - iso_week_start(year)) // 7


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class DateValue(BaseModel):
    """A civil date-time on the astronomical year axis.

    Fields hold wall-clock values in the zone given by
    ``offset_minutes`` (minutes east of UTC).
    """

    model_config = {"frozen": True}

    year: int
    month: int = Field(default=1, ge=1, le=12)
    day: int = Field(default=1, ge=1, le=31)
    hour: int = Field(default=0, ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)
    second: int = Field(default=0, ge=0, le=59)
    millisecond: int = Field(default=0, ge=0, le=999)
    offset_minutes: int = Field(default=0, ge=-18 * 60, le=18 * 60)

    @model_validator(mode="after")
    def _check_day_of_month(self) -> DateValue:
        limit = days_in_month(self.year, self.month)
        if self.day > limit:
            msg = f"day {self.day} out of range for {self.year:04d}-{self.month:02d}"
            raise ValueError(msg)
        return self

    @property
    def epoch_day(self) -> int:
        return days_from_civil(self.year, self.month, self.day)

    @property
    def weekday(self) -> int:
        """Monday is 0 and Sunday is 6, as in :meth:`datetime.date.weekday`."""
        return _weekday_of(self.epoch_day)

    def to_millis(self) -> int:
        """Signed milliseconds since 1970-01-01T00:00Z."""
        clock = ((self.hour * 60 + self.minute) * 60 + self.second) * 1000 + self.millisecond
        return self.epoch_day * _MS_PER_DAY + clock - self.offset_minutes * 60_000

    @classmethod
    def from_datetime(cls, value: datetime, offset_minutes: int = 0) -> DateValue:
        """Convert a stdlib datetime; an aware value keeps its own offset."""
        utcoffset = value.utcoffset()
        if utcoffset is not None:
            offset_minutes = round(utcoffset.total_seconds() / 60)
        return cls(
            year=value.year,
            month=value.month,
            day=value.day,
            hour=value.hour,
            minute=value.minute,
            second=value.second,
            millisecond=value.microsecond // 1000,
            offset_minutes=offset_minutes,
        )


class ParsedEventDate(BaseModel):
    """Outcome of :func:`parse_event_date`.

    Exactly one of ``start`` and ``error`` is set. ``error`` is
    ``"empty"`` for blank input and ``"unparsed"`` when no format
    matched.
    """

    model_config = {"frozen": True}

    start: DateValue | None = None
    precision: DatePrecision | None = None
    approximate: bool = False
    is_bce: bool = False
    original_year: int | None = None
    error: Literal["empty", "unparsed"] | None = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> ParsedEventDate:
        if (self.start is None) == (self.error is None):
            msg = "exactly one of start or error must be set"
            raise ValueError(msg)
        return self

    @property
    def ok(self) -> bool:
        return self.start is not None


class DateParseOptions(BaseModel):
    """Explicit context for date parsing.

    Attributes:
        forward_date: Resolve ambiguous relative expressions into the
            future ("friday" means the coming one).
        timezone: IANA zone name, ``"+05:30"``-style offset, or minutes
            east of UTC. Used when the text carries no offset. ``None``
            means UTC.
        locale: BCP-47 tag; its language selects the vocabulary for
            relative expressions and the display layout.
        reference_date: "Now" for relative expressions. Without it,
            relative expressions are not attempted.
    """

    model_config = {"frozen": True}

    forward_date: bool = False
    timezone: str | int | None = None
    locale: str | None = None
    reference_date: datetime | date | None = None


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_APPROX_PATTERN = re.compile(r"~|\b(?:circa|around|about|approx)\b\.?", re.IGNORECASE)

# BC, BCE, B.C., B.C.E., AD, A.D., CE, C.E. as standalone tokens.
_ERA_TOKEN = re.compile(
    r"(?<![A-Za-z.])(B\.?\s?C\.?(?:\s?E\.?)?|A\.?\s?D\.?|C\.?\s?E\.?)(?!\w)",
    re.IGNORECASE,
)

_OFFSET = r"(?P<offset>Z|UTC|[+-]\d{2}(?::?\d{2})?)"
_CLOCK = r"(?P<hour>\d{2})(?::(?P<minute>\d{2})(?::(?P<second>\d{2})(?:[.,](?P<fraction>\d{1,9}))?)?)?"

_ISO_PATTERN = re.compile(
    r"(?P<year>[+-]\d{6}|\d{4})"
    r"(?:-(?P<ordinal>\d{3})|-(?P<month>\d{2})(?:-(?P<day>\d{2}))?|(?P<bmonth>\d{2})(?P<bday>\d{2})"
    r"|-?W(?P<week>\d{2})(?:-?(?P<isoweekday>\d))?)?"
    rf"(?:T{_CLOCK}{_OFFSET}?)?",
    re.IGNORECASE,
)
# Anything shaped like a week date; a failed ISO parse of one is final.
_WEEK_DATE_SHAPE = re.compile(r"[+-]?\d{4,6}-?W\d", re.IGNORECASE)
_SQL_PATTERN = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    rf"(?:\s+{_CLOCK}(?:\s*{_OFFSET})?)?",
    re.IGNORECASE,
)
_OFFSET_PATTERN = re.compile(r"(?:UTC|GMT)?\s*(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?")

_ERA_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?P<year>\d{1,6})\s*(?P<era>BC|AD)"),
    re.compile(r"(?P<era>BC|AD)\s*(?P<year>\d{1,6})"),
    re.compile(r"(?P<day>\d{1,2})\s+(?P<month>[a-z]+)\.?,?\s+(?P<year>\d{1,6})\s*(?P<era>BC|AD)", re.I),
    re.compile(r"(?P<month>[a-z]+)\.?\s+(?P<day>\d{1,2}),?\s+(?P<year>\d{1,6})\s*(?P<era>BC|AD)", re.I),
    re.compile(r"(?P<month>[a-z]+)\.?\s+(?P<year>\d{1,6})\s*(?P<era>BC|AD)", re.I),
)

_FALLBACK_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?P<year>\d{4})-(?P<month>\d{1,2})"),  # yyyy-M
    re.compile(r"(?P<month>[a-z]+)\.?\s+(?P<day>\d{1,2}),?\s+(?P<year>\d{4})", re.I),  # LLL(L) dd yyyy
)

_WEEKDAY_EXPRESSION = re.compile(r"(?:(?P<modifier>next|last|this)\s+)?(?P<weekday>[a-z]+)\.?", re.I)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _strip_qualifiers(text: str) -> str:
    return " ".join(_APPROX_PATTERN.sub(" ", text).split())


def _month_number(name: str) -> int | None:
    return _MONTH_LOOKUP.get(name.lower().rstrip("."))


def _parse_offset(text: str) -> int | None:
    if text.upper() in ("Z", "UTC", "GMT"):
        return 0
    match = _OFFSET_PATTERN.fullmatch(text.strip())
    if match is None:
        return None
    minutes = int(match["hours"]) * 60 + int(match["minutes"] or 0)
    return -minutes if match["sign"] == "-" else minutes


def _zone_offset(zone: str | int | None, year: int, month: int, day: int, hour: int) -> int:
    """Minutes east of UTC for *zone* at the given wall-clock date.

    Dates outside the stdlib's year range use the zone's offset at the
    nearest representable year. Unknown zone names fall back to UTC.
    """
    if zone is None:
        return 0
    if isinstance(zone, int):
        return zone
    fixed = _parse_offset(zone)
    if fixed is not None:
        return fixed
    try:
        tz = ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r; using UTC", zone)
        return 0
    clamped_year = min(max(year, 1), 9999)
    clamped_day = min(day, days_in_month(clamped_year, month))
    local = datetime(clamped_year, month, clamped_day, hour, tzinfo=tz)
    offset = local.utcoffset()
    # Local mean time offsets carry seconds; round to the nearest minute.
    return round(offset.total_seconds() / 60) if offset is not None else 0


def _make_date(
    options: DateParseOptions,
    year: int,
    month: int = 1,
    day: int = 1,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millisecond: int = 0,
    offset: str | None = None,
) -> DateValue | None:
    """Build a validated :class:`DateValue`, or ``None`` if out of range."""
    if not (1 <= month <= 12) or not (1 <= day <= days_in_month(year, month)):
        return None
    if offset is not None:
        offset_minutes = _parse_offset(offset)
        if offset_minutes is None:
            return None
    else:
        offset_minutes = _zone_offset(options.timezone, year, month, day, hour)
    try:
        return DateValue(
            year=year,
            month=month,
            day=day,
            hour=hour,
            minute=minute,
            second=second,
            millisecond=millisecond,
            offset_minutes=offset_minutes,
        )
    except ValidationError:
        return None


def _clock_parts(match: re.Match[str]) -> dict[str, int]:
    fraction = match["fraction"]
    return {
        "hour": int(match["hour"] or 0),
        "minute": int(match["minute"] or 0),
        "second": int(match["second"] or 0),
        "millisecond": int(fraction[:3].ljust(3, "0")) if fraction else 0,
    }


# ---------------------------------------------------------------------------
# Parse stages
# ---------------------------------------------------------------------------


def _parse_iso(text: str, options: DateParseOptions) -> DateValue | None:
    match = _ISO_PATTERN.fullmatch(text)
    if match is None:
        return None
    year = int(match["year"])
    has_day = bool(match["day"] or match["bday"] or match["ordinal"] or match["week"])
    if match["hour"] is not None and not has_day:
        return None
    if match["week"]:
        week = int(match["week"])
        weekday = int(match["isoweekday"] or 1)
        if not 1 <= week <= iso_weeks_in_year(year) or not 1 <= weekday <= 7:
            return None
        year, month, day = civil_from_days(iso_week_start(year) + (week - 1) * 7 + weekday - 1)
    elif match["ordinal"]:
        ordinal = int(match["ordinal"])
        if not 1 <= ordinal <= (366 if is_leap_year(year) else 365):
            return None
        month = 1
        while ordinal > days_in_month(year, month):
            ordinal -= days_in_month(year, month)
            month += 1
        day = ordinal
    else:
        month = int(match["month"] or match["bmonth"] or 1)
        day = int(match["day"] or match["bday"] or 1)
    clock = _clock_parts(match) if match["hour"] is not None else {}
    return _make_date(options, year, month, day, offset=match["offset"], **clock)


def _parse_sql(text: str, options: DateParseOptions) -> DateValue | None:
    match = _SQL_PATTERN.fullmatch(text)
    if match is None:
        return None
    clock = _clock_parts(match) if match["hour"] is not None else {}
    return _make_date(
        options,
        int(match["year"]),
        int(match["month"]),
        int(match["day"]),
        offset=match["offset"],
        **clock,
    )


def _normalize_era(text: str) -> str:
    """Rewrite every era token to a bare ``BC`` or ``AD``."""

    def _replace(match: re.Match[str]) -> str:
        return "BC" if match.group(1)[0] in "bB" else "AD"

    return _ERA_TOKEN.sub(_replace, text)


def _parse_era(text: str, options: DateParseOptions) -> tuple[DateValue, int | None] | None:
    """Parse an era-tagged date.

    Returns ``(value, original_year)`` where *original_year* is the
    written year for BC dates and ``None`` for AD dates.
    """
    normalized = _normalize_era(text)
    for pattern in _ERA_PATTERNS:
        match = pattern.fullmatch(normalized)
        if match is None:
            continue
        groups = match.groupdict()
        written = int(groups["year"])
        if written < 1:
            return None
        month = 1
        if groups.get("month"):
            month_number = _month_number(groups["month"])
            if month_number is None:
                continue
            month = month_number
        day = int(groups["day"]) if groups.get("day") else 1
        is_bce = groups["era"] == "BC"
        year = 1 - written if is_bce else written
        value = _make_date(options, year, month, day)
        if value is not None:
            return value, (written if is_bce else None)
    return None


def _parse_fallback(text: str, options: DateParseOptions) -> DateValue | None:
    for pattern in _FALLBACK_PATTERNS:
        match = pattern.fullmatch(text)
        if match is None:
            continue
        groups = match.groupdict()
        month = 1
        if groups.get("month"):
            if groups["month"].isdigit():
                month = int(groups["month"])
            else:
                month_number = _month_number(groups["month"])
                if month_number is None:
                    continue
                month = month_number
        day = int(groups["day"]) if groups.get("day") else 1
        value = _make_date(options, int(groups["year"]), month, day)
        if value is not None:
            return value
    return None


def _language(locale: str | None) -> list[str] | None:
    if not locale:
        return None
    return [re.split(r"[-_]", locale, maxsplit=1)[0].lower()]


def _reference(options: DateParseOptions) -> datetime | None:
    base = options.reference_date
    if base is None or isinstance(base, datetime):
        return base
    return datetime.combine(base, time())


def _parse_weekday(text: str, options: DateParseOptions) -> DateValue | None:
    """Resolve an English weekday expression against the reference day."""
    base = _reference(options)
    if base is None:
        return None
    language = _language(options.locale)
    if language is not None and language != ["en"]:
        return None
    match = _WEEKDAY_EXPRESSION.fullmatch(text)
    if match is None:
        return None
    target = _WEEKDAY_LOOKUP.get(match["weekday"].lower())
    if target is None:
        return None

    reference_day = days_from_civil(base.year, base.month, base.day)
    current = _weekday_of(reference_day)
    modifier = (match["modifier"] or "").lower()
    if not modifier:
        modifier = "next" if options.forward_date else "this"
    if modifier == "next":
        delta = (target - current) % 7 or 7
    elif modifier == "last":
        delta = -((current - target) % 7 or 7)
    else:
        delta = target - current
    return _make_date(options, *civil_from_days(reference_day + delta))


def _parse_relative(text: str, options: DateParseOptions) -> DateValue | None:
    """Resolve a natural-language expression against the reference date."""
    base = _reference(options)
    if base is None:
        return None
    settings = {
        "RELATIVE_BASE": base.replace(tzinfo=None),
        "PREFER_DATES_FROM": "future" if options.forward_date else "current_period",
        "PREFER_DAY_OF_MONTH": "first",
    }
    try:
        parsed = dateparser.parse(text, languages=_language(options.locale), settings=settings)
    except ValueError:
        logger.warning("dateparser rejected locale %r", options.locale)
        return None
    if parsed is None:
        return None
    if parsed.utcoffset() is not None:
        return DateValue.from_datetime(parsed)
    offset = _zone_offset(options.timezone, parsed.year, parsed.month, parsed.day, parsed.hour)
    return DateValue.from_datetime(parsed, offset_minutes=offset)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def infer_precision(value: DateValue) -> DatePrecision:
    """Finest non-default component of *value*.

    An explicit January 1st cannot be told apart from a bare year and
    reads as year precision.
    """
    if value.hour or value.minute or value.second or value.millisecond:
        return DatePrecision.TIME
    if value.day != 1:
        return DatePrecision.DAY
    if value.month != 1:
        return DatePrecision.MONTH
    return DatePrecision.YEAR


def parse_event_date(
    text: str | None,
    options: DateParseOptions | None = None,
) -> ParsedEventDate:
    """Parse a free-form date string.

    Blank input yields ``error="empty"``; input no stage understands
    yields ``error="unparsed"``. Qualifiers such as "circa" or ``~``
    set ``approximate`` and are ignored for matching.

    Raises:
        TypeError: If *text* is neither a string nor ``None``.
    """
    if text is not None and not isinstance(text, str):
        msg = f"date text must be a string, got {type(text).__name__}"
        raise TypeError(msg)
    if not text or not text.strip():
        return ParsedEventDate(error="empty")

    opts = options or DateParseOptions()
    raw = text.strip()
    approximate = _APPROX_PATTERN.search(raw) is not None
    cleaned = _strip_qualifiers(raw)
    if not cleaned:
        return ParsedEventDate(error="unparsed")

    original_year: int | None = None
    start = _parse_iso(cleaned, opts) or _parse_sql(cleaned, opts)
    if start is None and _ERA_TOKEN.search(cleaned):
        era = _parse_era(cleaned, opts)
        if era is not None:
            start, original_year = era
    if start is None and not _WEEK_DATE_SHAPE.match(cleaned):
        start = (
            _parse_fallback(cleaned, opts)
            or _parse_weekday(cleaned, opts)
            or _parse_relative(cleaned, opts)
        )
    if start is None:
        logger.debug("No date format matched %r", raw)
        return ParsedEventDate(error="unparsed")

    return ParsedEventDate(
        start=start,
        precision=infer_precision(start),
        approximate=approximate,
        is_bce=original_year is not None,
        original_year=original_year,
    )


def to_millis(value: ParsedEventDate | DateValue | None) -> int | None:
    """Signed epoch milliseconds; ``None`` for a missing or failed parse."""
    if isinstance(value, ParsedEventDate):
        value = value.start
    if value is None:
        return None
    return value.to_millis()


def chronological_key(parsed: ParsedEventDate) -> tuple[int, int]:
    """Sort key placing dated entries in time order and failures last."""
    if parsed.start is None:
        return (1, 0)
    return (0, parsed.start.to_millis())


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

# Locales whose medium format puts the day before the month.
_DAY_FIRST_LOCALES = frozenset({"en-gb", "en-au", "en-ie", "en-nz", "en-in"})


def _clock_12h(value: DateValue) -> str:
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {meridiem}"


def _format_bce(value: DateValue, year: int, precision: DatePrecision) -> str:
    month = MONTH_ABBREVIATIONS[value.month - 1]
    if precision is DatePrecision.YEAR:
        return f"{year} BCE"
    if precision is DatePrecision.MONTH:
        return f"{month} {year} BCE"
    if precision is DatePrecision.DAY:
        return f"{month} {value.day}, {year} BCE"
    return f"{month} {value.day}, {year} BCE, {_clock_12h(value)}"


def _format_medium(value: DateValue, locale: str | None) -> str:
    weekday = WEEKDAY_ABBREVIATIONS[value.weekday]
    month = MONTH_ABBREVIATIONS[value.month - 1]
    if locale and locale.replace("_", "-").lower() in _DAY_FIRST_LOCALES:
        return f"{weekday}, {value.day} {month} {value.year}, {value.hour:02d}:{value.minute:02d}"
    return f"{weekday}, {month} {value.day}, {value.year}, {_clock_12h(value)}"


def to_display(
    value: ParsedEventDate | DateValue | None,
    locale: str | None = None,
    is_bce: bool | None = None,
    original_year: int | None = None,
) -> str:
    """Human-readable rendering of a parsed date.

    BCE dates show the year as written with a ``BCE`` suffix, at the
    precision that was parsed (``"500 BCE"``, ``"Mar 23, 44 BCE"``).
    Other dates use a medium date-time layout with weekday. Missing or
    failed values render as ``""``.
    """
    precision: DatePrecision | None = None
    if isinstance(value, ParsedEventDate):
        if is_bce is None:
            is_bce = value.is_bce
        if original_year is None:
            original_year = value.original_year
        precision = value.precision
        value = value.start
    if value is None:
        return ""
    if is_bce:
        year = original_year if original_year is not None else 1 - value.year
        return _format_bce(value, year, precision or infer_precision(value))
    return _format_medium(value, locale)
