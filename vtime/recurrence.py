"""Recurrence rules (RRULE values) and their expansion through dateutil"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, fields

from dateutil import rrule

from .exceptions import TypeDecodeError, VTimeError
from .helper.constants import FREQUENCIES, WEEKDAYS, ValueType
from .helper.imports_ import calendar, re
from .patterns import patterns
from .values import DateTimeValue, TimeKind, date_time_to_string, date_to_string, parse_date, parse_date_time

weekday_num_re = re.compile(patterns["weekday_num"])
unsigned_re = re.compile("[0-9]{1,2}")
signed_re = re.compile("[+-]?[0-9]{1,3}")


def _error(msg):
    return TypeDecodeError(ValueType.RECUR, msg)


@dataclass(frozen=True)
class WeekdayNum:
    """
    A BYDAY item: a weekday, optionally the nth (or nth from last) in the period.
    """

    weekday: str
    ordinal: int | None = None

    def __str__(self):
        return self.weekday if self.ordinal is None else f"{self.ordinal}{self.weekday}"

    def to_dateutil(self):
        day = getattr(rrule, self.weekday)
        return day if self.ordinal is None else day(self.ordinal)


@dataclass(frozen=True)
class RecurrenceDescriptor:
    """
    A parsed RRULE.

    Every field is optional so that single rule parts can be folded together
    with merge(). limit holds UNTIL (a date or a UTC DateTimeValue) or COUNT
    (an int); one field for both makes them mutually exclusive.
    """

    freq: str | None = None
    limit: dt.date | DateTimeValue | int | None = None
    interval: int | None = None
    by_second: tuple[int, ...] | None = None
    by_minute: tuple[int, ...] | None = None
    by_hour: tuple[int, ...] | None = None
    by_day: tuple[WeekdayNum, ...] | None = None
    by_month_day: tuple[int, ...] | None = None
    by_year_day: tuple[int, ...] | None = None
    by_week_no: tuple[int, ...] | None = None
    by_month: tuple[int, ...] | None = None
    by_set_pos: tuple[int, ...] | None = None
    wkst: str | None = None

    @property
    def count(self) -> int | None:
        return self.limit if isinstance(self.limit, int) else None

    @property
    def until(self) -> dt.date | DateTimeValue | None:
        return None if self.limit is None or isinstance(self.limit, int) else self.limit

    def merge(self, other: RecurrenceDescriptor) -> RecurrenceDescriptor:
        """
        Combine two descriptors, failing if both set the same field.
        """
        merged = {f.name: merge_field(f.name, getattr(self, f.name), getattr(other, f.name)) for f in fields(self)}
        return RecurrenceDescriptor(**merged)

    def to_string(self) -> str:
        """
        Serialize back to RRULE value text.
        """
        parts = [f"FREQ={self.freq}"]
        if isinstance(self.until, DateTimeValue):
            parts.append(f"UNTIL={date_time_to_string(self.until)}")
        elif self.until is not None:
            parts.append(f"UNTIL={date_to_string(self.until)}")
        if self.count is not None:
            parts.append(f"COUNT={self.count}")
        if self.interval is not None:
            parts.append(f"INTERVAL={self.interval}")
        for key, name, _ in _by_parts:
            values = getattr(self, name)
            if values is not None:
                parts.append(f"{key}={','.join(str(v) for v in values)}")
        if self.wkst is not None:
            parts.append(f"WKST={self.wkst}")
        return ";".join(parts)

    def can_occur(self) -> bool:
        """
        Return False if BYMONTH, BYMONTHDAY, BYYEARDAY, BYDAY and BYSECOND
        together exclude every day (or second), like February 30th.

        BYDAY ordinals and BYWEEKNO are not taken into account.
        """
        if self.by_second is not None and set(self.by_second) == {60}:
            return False
        return any(_matches_day(self, day) for day in _sample_days())

    def to_rrule(self, dtstart: dt.datetime, utc_offset: dt.timedelta | None = None) -> rrule.rrule:
        """
        Build a lazily evaluated dateutil rrule starting at dtstart.

        A UTC UNTIL is made naive when dtstart is naive, dateutil refuses to
        mix the two; utc_offset, if given, is the offset of dtstart's wall
        clock at which UNTIL is read. Rules that can never occur are
        rejected, dateutil would search up to year 9999 for them.
        """
        if not self.can_occur():
            raise _error(f"{self.to_string()} never occurs")
        until = self.until
        if isinstance(until, DateTimeValue):
            until = until.value
            if dtstart.tzinfo is None:
                until = until.replace(tzinfo=None) + (utc_offset or dt.timedelta(0))

        def as_list(values):
            return None if values is None else list(values)

        try:
            return rrule.rrule(
                FREQUENCIES.index(self.freq),
                dtstart=dtstart,
                interval=self.interval or 1,
                wkst=None if self.wkst is None else WEEKDAYS.index(self.wkst),
                count=self.count,
                until=until,
                bysetpos=as_list(self.by_set_pos),
                bymonth=as_list(self.by_month),
                bymonthday=as_list(self.by_month_day),
                byyearday=as_list(self.by_year_day),
                byweekno=as_list(self.by_week_no),
                byweekday=None if self.by_day is None else [d.to_dateutil() for d in self.by_day],
                byhour=as_list(self.by_hour),
                byminute=as_list(self.by_minute),
                bysecond=as_list(self.by_second),
            )
        except (ValueError, TypeError) as e:
            raise _error(f"Can't expand {self.to_string()}: {e!s}") from e


def _sample_days():
    # 28 years hold every combination of leap year and weekday of January 1st
    day = dt.date(2000, 1, 1)
    while day.year < 2028:
        yield day
        day += dt.timedelta(days=1)


def _matches_day(rule: RecurrenceDescriptor, day: dt.date) -> bool:
    if rule.by_month is not None and day.month not in rule.by_month:
        return False
    if rule.by_month_day is not None:
        month_length = calendar.monthrange(day.year, day.month)[1]
        if day.day not in rule.by_month_day and day.day - month_length - 1 not in rule.by_month_day:
            return False
    if rule.by_year_day is not None:
        year_length = 366 if calendar.isleap(day.year) else 365
        year_day = day.timetuple().tm_yday
        if year_day not in rule.by_year_day and year_day - year_length - 1 not in rule.by_year_day:
            return False
    if rule.by_day is not None and WEEKDAYS[day.weekday()] not in {d.weekday for d in rule.by_day}:
        return False
    return True


_field_labels = {"limit": "UNTIL/COUNT"}


def merge_field(name, left, right):
    """
    Return whichever of left and right is set, failing if both are.
    """
    if left is None:
        return right
    if right is None:
        return left
    label = _field_labels.get(name, name.replace("_", "").upper())
    raise _error(f"{label} is set more than once")


# ----------------------- Rule part parsers ------------------------------------
def _parse_freq(value):
    value = value.upper()
    if value not in FREQUENCIES:
        raise _error(f"'{value}' is not a frequency")
    return value


def _parse_until(value):
    try:
        if "T" not in value:
            return parse_date(value)
        until = parse_date_time(value)
    except TypeDecodeError as e:
        raise _error(f"UNTIL '{value}' is not a DATE or DATE-TIME") from e
    if until.kind is not TimeKind.UTC:
        raise _error(f"UNTIL '{value}' must be in UTC")
    return until


def _parse_count(value):
    if not value.isdigit() or not value.isascii():
        raise _error(f"COUNT '{value}' is not an unsigned integer")
    return int(value)


def _parse_interval(value):
    interval = _parse_count(value)
    if interval < 1:
        raise _error("INTERVAL must be positive")
    return interval


def _int_list(low, high, signed=False):
    """
    Return a parser for comma separated integers in low..high (or -high..-low too, if signed).
    """
    item_re = signed_re if signed else unsigned_re

    def parse(value):
        result = []
        for item in value.split(","):
            if not item_re.fullmatch(item):
                raise _error(f"'{item}' is not a valid list item")
            number = int(item)
            magnitude = abs(number) if signed else number
            if not low <= magnitude <= high:
                raise _error(f"'{item}' is out of range")
            result.append(number)
        return tuple(result)

    return parse


def _parse_weekday(value):
    value = value.upper()
    if value not in WEEKDAYS:
        raise _error(f"'{value}' is not a weekday")
    return value


def _parse_by_day(value):
    result = []
    for item in value.upper().split(","):
        match = weekday_num_re.fullmatch(item)
        if match is None:
            raise _error(f"'{item}' is not a valid BYDAY item")
        ordinal = match.group("ordinal")
        if ordinal is not None:
            ordinal = int(ordinal)
            if not 1 <= abs(ordinal) <= 53:
                raise _error(f"'{item}' is out of range")
        result.append(WeekdayNum(match.group("weekday"), ordinal))
    return tuple(result)


# (rule part, field, parser); ordered as RFC 5545 lists them
_by_parts = (
    ("BYSECOND", "by_second", _int_list(0, 60)),
    ("BYMINUTE", "by_minute", _int_list(0, 59)),
    ("BYHOUR", "by_hour", _int_list(0, 23)),
    ("BYDAY", "by_day", _parse_by_day),
    ("BYMONTHDAY", "by_month_day", _int_list(1, 31, signed=True)),
    ("BYYEARDAY", "by_year_day", _int_list(1, 366, signed=True)),
    ("BYWEEKNO", "by_week_no", _int_list(1, 53, signed=True)),
    ("BYMONTH", "by_month", _int_list(1, 12)),
    ("BYSETPOS", "by_set_pos", _int_list(1, 366, signed=True)),
)

_rule_parts = {
    "FREQ": ("freq", _parse_freq),
    "UNTIL": ("limit", _parse_until),
    "COUNT": ("limit", _parse_count),
    "INTERVAL": ("interval", _parse_interval),
    "WKST": ("wkst", _parse_weekday),
}
_rule_parts.update({key: (name, parser) for key, name, parser in _by_parts})


def parse_rule_part(fragment: str) -> RecurrenceDescriptor:
    """
    Parse one KEY=value rule part into a descriptor with a single field set.
    """
    key, separator, value = fragment.partition("=")
    key = key.upper()
    if not separator or not value:
        raise _error(f"'{fragment}' is not a KEY=value rule part")
    if key not in _rule_parts:
        raise _error(f"Unknown rule part '{key}'")
    name, parser = _rule_parts[key]
    return RecurrenceDescriptor(**{name: parser(value)})


def parse_recurrence(s: str) -> RecurrenceDescriptor:
    """
    Parse an RRULE value, FREQ=<unit> then any number of ;KEY=value parts.

    Parts are merged left to right; repeating one, or giving both UNTIL and
    COUNT, is an error rather than last-wins.
    """
    fragments = s.split(";")
    if not fragments[0].upper().startswith("FREQ="):
        raise _error(f"'{s!s}' must start with FREQ=")
    descriptor = RecurrenceDescriptor()
    try:
        for fragment in fragments:
            descriptor = descriptor.merge(parse_rule_part(fragment))
    except VTimeError as e:
        raise _error(f"'{s!s}' is not a valid RECUR: {e.msg}") from e
    return descriptor
