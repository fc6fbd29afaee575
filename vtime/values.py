"""Typed values for iCalendar (RFC 5545) property values, and their grammars"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from dateutil import tz

from .exceptions import (
    InvalidDateError,
    InvalidDateTimeError,
    InvalidTimeError,
    TypeDecodeError,
)
from .helper import num_to_digits, split_delta
from .helper.constants import ValueType
from .helper.imports_ import base64, binascii, enum, re
from .patterns import patterns

# ------------------------------- Constants ------------------------------------
utc = tz.tzutc()

zero_delta = dt.timedelta(0)
one_day = dt.timedelta(days=1)

INTEGER_MIN = -(2**31)
INTEGER_MAX = 2**31 - 1

date_re = re.compile(patterns["date"])
time_re = re.compile(patterns["time"])
utc_offset_re = re.compile(patterns["utc_offset"])
duration_re = re.compile(patterns["duration"], re.DOTALL)
dur_week_re = re.compile(patterns["dur_week"])
dur_day_re = re.compile(patterns["dur_day"], re.DOTALL)
dur_time_re = re.compile(patterns["dur_time"], re.VERBOSE)
integer_re = re.compile(patterns["integer"])
float_re = re.compile(patterns["float"])
uri_re = re.compile(patterns["uri"])


# ------------------------------- Value classes --------------------------------
class TimeKind(enum.Enum):
    """How a TIME or DATE-TIME value relates to UTC."""

    UTC = "utc"
    FLOATING = "floating"
    TIMEZONE = "timezone"


def _check_tzid(kind, tzid, error_class):
    if kind is TimeKind.TIMEZONE and not tzid:
        raise error_class(f"A {kind.name} value needs a tzid")
    if kind is not TimeKind.TIMEZONE and tzid is not None:
        raise error_class(f"A {kind.name} value can't carry tzid {tzid!r}")


@dataclass(frozen=True)
class TimeValue:
    """
    A wall-clock time. tzid is set exactly when kind is TIMEZONE.
    """

    kind: TimeKind
    time: dt.time
    tzid: str | None = None

    def __post_init__(self):
        _check_tzid(self.kind, self.tzid, InvalidTimeError)


@dataclass(frozen=True)
class DateTimeValue:
    """
    A DATE-TIME together with its kind.

    UTC values hold an aware datetime in UTC; FLOATING and TIMEZONE values hold
    a naive local datetime, the latter naming (not owning) the timezone it is
    to be resolved against.
    """

    kind: TimeKind
    value: dt.datetime
    tzid: str | None = None

    def __post_init__(self):
        _check_tzid(self.kind, self.tzid, InvalidDateTimeError)
        if (self.kind is TimeKind.UTC) != (self.value.tzinfo is not None):
            raise InvalidDateTimeError(f"A {self.kind.name} value can't hold {self.value!r}")

    @classmethod
    def from_utc(cls, value: dt.datetime) -> DateTimeValue:
        if value.tzinfo is None:
            value = value.replace(tzinfo=utc)
        return cls(TimeKind.UTC, value.astimezone(utc))

    @classmethod
    def floating(cls, value: dt.datetime) -> DateTimeValue:
        return cls(TimeKind.FLOATING, value)

    @classmethod
    def local(cls, value: dt.datetime, tzid: str) -> DateTimeValue:
        return cls(TimeKind.TIMEZONE, value, tzid)

    def replace(self, value: dt.datetime) -> DateTimeValue:
        """
        Return a value of the same kind and tzid holding value instead.
        """
        return DateTimeValue(self.kind, value, self.tzid)

    def __add__(self, delta):
        if not isinstance(delta, dt.timedelta):
            return NotImplemented
        return self.replace(self.value + delta)


@dataclass(frozen=True)
class Period:
    """
    A PERIOD: a start with either an explicit end or a duration.
    """

    start: DateTimeValue
    end: DateTimeValue | None = None
    duration: dt.timedelta | None = None

    def __post_init__(self):
        if (self.end is None) == (self.duration is None):
            raise TypeDecodeError(ValueType.PERIOD, "A PERIOD needs exactly one of an end or a duration")

    @property
    def end_value(self) -> DateTimeValue:
        if self.end is not None:
            return self.end
        return self.start + self.duration


# ----------------------- Parsing functions ------------------------------------
def parse_date(s: str) -> dt.date:
    """
    Parse a DATE, YYYYMMDD.
    """
    match = date_re.fullmatch(s)
    if match is None:
        raise InvalidDateError(f"'{s!s}' is not a valid DATE")
    try:
        return dt.date(int(match.group("year")), int(match.group("month")), int(match.group("day")))
    except ValueError as e:
        raise InvalidDateError(f"'{s!s}' is not a valid DATE") from e


def parse_time(s: str, tzid: str | None = None) -> TimeValue:
    """
    Parse a TIME, HHMMSS with an optional trailing Z.

    A trailing Z makes the value UTC, which conflicts with a tzid. Otherwise
    the tzid, if any, makes it a TIMEZONE value and its absence a FLOATING one.
    """
    match = time_re.fullmatch(s)
    if match is None:
        raise InvalidTimeError(f"'{s!s}' is not a valid TIME")
    try:
        time = dt.time(int(match.group("hour")), int(match.group("minute")), int(match.group("second")))
    except ValueError as e:
        raise InvalidTimeError(f"'{s!s}' is not a valid TIME") from e

    if match.group("utc"):
        if tzid is not None:
            raise InvalidTimeError(f"UTC time '{s!s}' can't have TZID {tzid!s}")
        return TimeValue(TimeKind.UTC, time)
    if tzid is not None:
        return TimeValue(TimeKind.TIMEZONE, time, tzid)
    return TimeValue(TimeKind.FLOATING, time)


def parse_date_time(s: str, tzid: str | None = None) -> DateTimeValue:
    """
    Parse a DATE-TIME, a DATE and a TIME joined by "T".
    """
    date_text, separator, time_text = s.partition("T")
    if not separator:
        raise InvalidDateTimeError(f"'{s!s}' is not a valid DATE-TIME")
    try:
        date = parse_date(date_text)
        time = parse_time(time_text, tzid)
    except (InvalidDateError, InvalidTimeError) as e:
        raise InvalidDateTimeError(f"'{s!s}' is not a valid DATE-TIME: {e.msg}") from e

    value = dt.datetime.combine(date, time.time)
    if time.kind is TimeKind.UTC:
        return DateTimeValue.from_utc(value)
    return DateTimeValue(time.kind, value, time.tzid)


def _parse_dur_time(s: str) -> dt.timedelta:
    match = dur_time_re.fullmatch(s)
    if match is None:
        raise ValueError(f"'{s!s}' is not a valid dur-time")
    hours, minutes, seconds = match.group("hours", "minutes", "seconds")
    if hours is None and minutes is None and seconds is None:
        raise ValueError("dur-time is empty")
    if hours is not None and minutes is None and seconds is not None:
        raise ValueError("dur-time can't skip from hours to seconds")
    return dt.timedelta(hours=int(hours or 0), minutes=int(minutes or 0), seconds=int(seconds or 0))


def parse_duration(s: str) -> dt.timedelta:
    """
    Parse a DURATION.

    Returns a timedelta; weeks and days collapse into its day count and a
    leading "-" negates the whole span.
    """
    match = duration_re.fullmatch(s)
    if match is None:
        raise TypeDecodeError(ValueType.DURATION, f"'{s!s}' is not a valid DURATION")
    body = match.group("body")

    try:
        if body.startswith("T"):
            delta = _parse_dur_time(body)
        elif dur_week_re.fullmatch(body):
            delta = dt.timedelta(weeks=int(body[:-1]))
        else:
            day_match = dur_day_re.fullmatch(body)
            if day_match is None:
                raise ValueError(f"'{body!s}' is not a valid dur-date")
            delta = dt.timedelta(days=int(day_match.group("days")))
            if day_match.group("time") is not None:
                delta += _parse_dur_time(day_match.group("time"))
    except (ValueError, OverflowError) as e:
        raise TypeDecodeError(ValueType.DURATION, f"'{s!s}' is not a valid DURATION: {e!s}") from e

    return -delta if match.group("sign") == "-" else delta


def parse_utc_offset(s: str) -> dt.timedelta:
    """
    Parse a UTC-OFFSET, (+|-)HHMM[SS], into the timedelta local time is ahead of UTC.
    """
    match = utc_offset_re.fullmatch(s)
    if match is None:
        raise TypeDecodeError(ValueType.UTC_OFFSET, f"'{s!s}' is not a valid UTC-OFFSET")
    hours = int(match.group("hours"))
    minutes = int(match.group("minutes"))
    seconds = int(match.group("seconds") or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        raise TypeDecodeError(ValueType.UTC_OFFSET, f"'{s!s}' is out of range")

    offset = dt.timedelta(hours=hours, minutes=minutes, seconds=seconds)
    if match.group("sign") == "-":
        if offset == zero_delta:
            raise TypeDecodeError(ValueType.UTC_OFFSET, f"'{s!s}' is not allowed, use +0000")
        offset = -offset
    return offset


def parse_period(s: str, tzid: str | None = None) -> Period:
    """
    Parse a PERIOD, start/end or start/duration. Both sides share the tzid.
    """
    values = s.split("/")
    if len(values) != 2:
        raise TypeDecodeError(ValueType.PERIOD, f"'{s!s}' is not a valid PERIOD")
    start_text, end_text = values
    try:
        start = parse_date_time(start_text, tzid)
    except InvalidDateTimeError as e:
        raise TypeDecodeError(ValueType.PERIOD, f"'{s!s}' has an invalid start: {e.msg}") from e

    try:
        end = parse_date_time(end_text, tzid)
    except InvalidDateTimeError:
        # period-start = date-time "/" dur-value
        try:
            duration = parse_duration(end_text)
        except TypeDecodeError as e:
            raise TypeDecodeError(ValueType.PERIOD, f"'{s!s}' has an invalid end: {e.msg}") from e
        return Period(start, duration=duration)

    if end.kind is not start.kind:
        raise TypeDecodeError(ValueType.PERIOD, f"'{s!s}' mixes {start.kind.name} and {end.kind.name} date-times")
    return Period(start, end=end)


def parse_boolean(s: str) -> bool:
    value = s.upper()
    if value not in ("TRUE", "FALSE"):
        raise TypeDecodeError(ValueType.BOOLEAN, f"'{s!s}' is not a valid BOOLEAN")
    return value == "TRUE"


def parse_integer(s: str) -> int:
    if not integer_re.fullmatch(s):
        raise TypeDecodeError(ValueType.INTEGER, f"'{s!s}' is not a valid INTEGER")
    value = int(s)
    if not INTEGER_MIN <= value <= INTEGER_MAX:
        raise TypeDecodeError(ValueType.INTEGER, f"'{s!s}' is out of range")
    return value


def parse_float(s: str) -> float:
    if not float_re.fullmatch(s):
        raise TypeDecodeError(ValueType.FLOAT, f"'{s!s}' is not a valid FLOAT")
    return float(s)


def parse_text(s: str) -> str:
    return s


def parse_binary(s: str) -> bytes:
    try:
        return base64.b64decode(s, validate=True)
    except (binascii.Error, ValueError) as e:
        raise TypeDecodeError(ValueType.BINARY, f"'{s!s}' is not valid BASE64") from e


def parse_uri(s: str) -> str:
    if not uri_re.fullmatch(s):
        raise TypeDecodeError(ValueType.URI, f"'{s!s}' is not a valid URI")
    return s


def parse_cal_address(s: str) -> str:
    try:
        return parse_uri(s)
    except TypeDecodeError as e:
        raise TypeDecodeError(ValueType.CAL_ADDRESS, f"'{s!s}' is not a valid CAL-ADDRESS") from e


# ------------------------ Serializing helper functions ------------------------
def date_to_string(date: dt.date) -> str:
    return num_to_digits(date.year, 4) + num_to_digits(date.month, 2) + num_to_digits(date.day, 2)


def _clock_to_string(value) -> str:
    return num_to_digits(value.hour, 2) + num_to_digits(value.minute, 2) + num_to_digits(value.second, 2)


def time_to_string(time: TimeValue) -> str:
    suffix = "Z" if time.kind is TimeKind.UTC else ""
    return _clock_to_string(time.time) + suffix


def date_time_to_string(date_time: DateTimeValue) -> str:
    """
    Output the DATE-TIME text; the tzid belongs in a TZID parameter, not here.
    """
    suffix = "Z" if date_time.kind is TimeKind.UTC else ""
    return f"{date_to_string(date_time.value)}T{_clock_to_string(date_time.value)}{suffix}"


def timedelta_to_string(delta: dt.timedelta) -> str:
    """
    Convert timedelta to an ical DURATION.
    """
    parts = split_delta(delta)
    output = "-P" if parts.negative else "P"
    if parts.weeks:
        return f"{output}{parts.weeks}W"
    if not parts.days and not parts.has_time:  # Deal with zero duration
        return f"{output}T0S"

    if parts.days:
        output += f"{parts.days}D"
    if parts.has_time:
        output += "T"
    if parts.hours:
        output += f"{parts.hours}H"
    if parts.minutes or (parts.hours and parts.seconds):
        output += f"{parts.minutes}M"
    if parts.seconds:
        output += f"{parts.seconds}S"
    return output


def delta_to_offset(delta: dt.timedelta) -> str:
    parts = split_delta(delta)
    output = parts.sign + num_to_digits(parts.hours, 2) + num_to_digits(parts.minutes, 2)
    if parts.seconds:
        output += num_to_digits(parts.seconds, 2)
    return output


def period_to_string(period: Period) -> str:
    txtstart = date_time_to_string(period.start)
    if period.end is None:
        txtend = timedelta_to_string(period.duration)
    else:
        txtend = date_time_to_string(period.end)
    return f"{txtstart}/{txtend}"
