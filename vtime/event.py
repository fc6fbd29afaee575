"""Combining DTSTART, DTEND and DURATION into one event time range"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from .base import Component, Property
from .exceptions import InvalidDateError, InvalidTimeRangeError, MismatchedDateTimeKindError
from .helper.constants import ValueType
from .helper.imports_ import enum
from .registry import decode_property, parse_date_or_date_time
from .timezone import TimezoneMap
from .values import DateTimeValue, TimeKind, one_day

one_second = dt.timedelta(seconds=1)


class RangeKind(enum.Enum):
    DATE = "date"
    DATE_TIME = "date-time"
    FLOATING_DATE_TIME = "floating-date-time"


@dataclass(frozen=True)
class EventTimeRange:
    """
    A resolved event time range, end exclusive.

    DATE ranges hold dates, DATE_TIME ranges aware UTC datetimes and
    FLOATING_DATE_TIME ranges naive datetimes.
    """

    kind: RangeKind
    start: dt.date
    end: dt.date

    def __post_init__(self):
        for bound in (self.start, self.end):
            if self.kind is RangeKind.DATE:
                valid = not isinstance(bound, dt.datetime)
            else:
                floating = self.kind is RangeKind.FLOATING_DATE_TIME
                valid = isinstance(bound, dt.datetime) and (bound.tzinfo is None) == floating
            if not valid:
                raise InvalidTimeRangeError(f"{bound!r} can't bound a {self.kind.value} range")

    @property
    def duration(self) -> dt.timedelta:
        return self.end - self.start


def _to_absolute(value: DateTimeValue, timezone_map: TimezoneMap) -> dt.datetime:
    return timezone_map.get_timezone(value.tzid).to_absolute(value.value)


def _date_time_range(start: DateTimeValue, end: DateTimeValue, timezone_map: TimezoneMap) -> EventTimeRange:
    if start.kind is not end.kind:
        raise MismatchedDateTimeKindError(f"Range from a {start.kind.name} to a {end.kind.name} date-time")
    if start.kind is TimeKind.UTC:
        return EventTimeRange(RangeKind.DATE_TIME, start.value, end.value)
    if start.kind is TimeKind.FLOATING:
        return EventTimeRange(RangeKind.FLOATING_DATE_TIME, start.value, end.value)
    # each side is resolved against its own tzid
    return EventTimeRange(RangeKind.DATE_TIME, _to_absolute(start, timezone_map), _to_absolute(end, timezone_map))


def _local_end_of_day(start: DateTimeValue) -> DateTimeValue:
    """
    The last second of start's local day: next midnight minus one second.
    """
    next_day = _next_date(start.value.date())
    return start.replace(dt.datetime.combine(next_day, dt.time.min) - one_second)


def _next_date(date: dt.date) -> dt.date:
    try:
        return date + one_day
    except OverflowError as e:
        raise InvalidDateError(f"{date} has no next day") from e


class EventTiming:
    """
    The raw DTSTART, DTEND and DURATION properties of an event.
    """

    def __init__(self, start: Property, end: Property | None = None, duration: Property | None = None):
        self.start = start
        self.end = end
        self.duration = duration

    @classmethod
    def from_component(cls, component: Component) -> EventTiming:
        start = component.get_property("DTSTART")
        if start is None:
            raise InvalidTimeRangeError(f"{component.name} has no DTSTART")
        return cls(start, component.get_property("DTEND"), component.get_property("DURATION"))

    def get_time_range(self, timezone_map: TimezoneMap) -> EventTimeRange:
        """
        Resolve the properties into one EventTimeRange.

        At most one of DTEND and DURATION may be present. A DATE start pairs
        only with a DATE end, a DATE-TIME start with a DATE-TIME end of the
        same kind or with a DURATION. With neither, a DATE range lasts one day,
        a UTC or floating range 24 hours and a TZID range ends at the last
        second of its local day.
        """
        start = parse_date_or_date_time(self.start)
        end = None if self.end is None else parse_date_or_date_time(self.end)
        duration = None if self.duration is None else decode_property(self.duration, ValueType.DURATION)
        if end is not None and duration is not None:
            raise InvalidTimeRangeError("DTEND and DURATION can't both be set")

        if not isinstance(start, DateTimeValue):
            if duration is not None:
                raise InvalidTimeRangeError("A DATE start can't take a DURATION")
            if end is None:
                return EventTimeRange(RangeKind.DATE, start, _next_date(start))
            if isinstance(end, DateTimeValue):
                raise InvalidTimeRangeError("A DATE start can't end at a DATE-TIME")
            return EventTimeRange(RangeKind.DATE, start, end)

        if end is not None and not isinstance(end, DateTimeValue):
            raise InvalidTimeRangeError("A DATE-TIME start can't end at a DATE")
        try:
            if end is None and duration is not None:
                end = start + duration
            elif end is None and start.kind is TimeKind.TIMEZONE:
                end = _local_end_of_day(start)
            elif end is None:
                end = start + one_day
        except OverflowError as e:
            raise InvalidTimeRangeError(f"The end of a range from {start.value} is out of range") from e
        return _date_time_range(start, end, timezone_map)


def resolve_time_range(
    start: Property, end: Property | None = None, duration: Property | None = None, *, timezone_map: TimezoneMap
) -> EventTimeRange:
    """
    Resolve DTSTART with an optional DTEND or DURATION against timezone_map.
    """
    return EventTiming(start, end, duration).get_time_range(timezone_map)
