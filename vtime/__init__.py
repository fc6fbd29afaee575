"""
vtime: iCalendar (RFC 5545) value parsing and time range resolution.

Parses DATE, TIME, DATE-TIME, DURATION, PERIOD, UTC-OFFSET, RECUR and the
scalar value types, resolves local times against VTIMEZONE definitions and
combines DTSTART, DTEND and DURATION into one event time range.
"""

from .base import Component, Property
from .event import EventTimeRange, EventTiming, RangeKind, resolve_time_range
from .exceptions import (
    InvalidDateError,
    InvalidDateTimeError,
    InvalidTimeError,
    InvalidTimeRangeError,
    InvalidTimezoneError,
    MismatchedDateTimeKindError,
    TypeDecodeError,
    VTimeError,
)
from .recurrence import RecurrenceDescriptor, WeekdayNum, parse_recurrence
from .registry import decode_property, decode_property_list, get_value_type, parse_date_or_date_time, register_value_type
from .timezone import Timezone, TimezoneMap, TimezoneTransition
from .values import DateTimeValue, Period, TimeKind, TimeValue

VERSION = "0.1.0"
