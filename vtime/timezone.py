"""VTIMEZONE definitions: offset transitions and local time resolution"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field

from dateutil import rrule

from .base import Component
from .exceptions import InvalidTimezoneError, VTimeError
from .helper import logger
from .helper.constants import ValueType
from .helper.imports_ import Mapping, itertools
from .recurrence import RecurrenceDescriptor
from .registry import decode_property, decode_property_list
from .values import DateTimeValue, TimeKind, utc

TRANSITION_NAMES = ("STANDARD", "DAYLIGHT")


def _floating(value, what):
    if not isinstance(value, DateTimeValue) or value.kind is not TimeKind.FLOATING:
        raise InvalidTimezoneError(f"{what} must be a floating DATE-TIME, not {value!r}")
    return value.value


@dataclass(frozen=True)
class TimezoneTransition:
    """
    One STANDARD or DAYLIGHT block of a VTIMEZONE.

    @ivar anchor:
        The naive local datetime (DTSTART) the offset takes effect at.
    @ivar offset:
        The TZOFFSETTO timedelta, local time = UTC + offset.
    @ivar rules:
        RRULEs generating further anchors at which offset applies again.
    @ivar dates:
        RDATEs, explicit further anchors.
    @ivar offset_from:
        The TZOFFSETFROM timedelta if given, the offset in effect just before
        each anchor. A UTC UNTIL of a rule is read at this offset.
    """

    anchor: dt.datetime
    offset: dt.timedelta
    rules: tuple[RecurrenceDescriptor, ...] = ()
    dates: tuple[dt.datetime, ...] = ()
    offset_from: dt.timedelta | None = None
    recurrence: rrule.rruleset | None = field(init=False, repr=False, compare=False, default=None)

    def __post_init__(self):
        if not self.rules and not self.dates:
            return
        # the rruleset drops an anchor that a rule generates again
        rruleset = rrule.rruleset()
        rruleset.rdate(self.anchor)
        try:
            for rule in self.rules:
                rruleset.rrule(rule.to_rrule(self.anchor, self.offset_from))
        except VTimeError as e:
            raise InvalidTimezoneError(f"Can't expand transition at {self.anchor}: {e.msg}") from e
        for date in self.dates:
            rruleset.rdate(date)
        object.__setattr__(self, "recurrence", rruleset)

    @classmethod
    def from_component(cls, component: Component) -> TimezoneTransition:
        """
        Build a transition from a STANDARD or DAYLIGHT component.

        DTSTART and TZOFFSETTO are required, TZOFFSETFROM is optional; RRULE
        and RDATE may repeat.
        """
        anchor = offset = offset_from = None
        rules = []
        dates = []
        for prop in component.properties:
            try:
                if prop.name == "DTSTART":
                    anchor = _floating(decode_property(prop, ValueType.DATE_TIME), "DTSTART")
                elif prop.name == "TZOFFSETTO":
                    offset = decode_property(prop, ValueType.UTC_OFFSET)
                elif prop.name == "TZOFFSETFROM":
                    offset_from = decode_property(prop, ValueType.UTC_OFFSET)
                elif prop.name == "RRULE":
                    rules.append(decode_property(prop, ValueType.RECUR))
                elif prop.name == "RDATE":
                    dates.extend(_floating(value, "RDATE") for value in decode_property_list(prop))
            except InvalidTimezoneError as e:
                e.line_number = prop.line_number
                raise
            except VTimeError as e:
                raise InvalidTimezoneError(f"Invalid {prop.name} in {component.name}: {e.msg}", prop.line_number) from e

        if anchor is None:
            raise InvalidTimezoneError(f"{component.name} has no DTSTART")
        if offset is None:
            raise InvalidTimezoneError(f"{component.name} has no TZOFFSETTO")
        return cls(anchor, offset, tuple(rules), tuple(dates), offset_from)

    def anchors(self):
        """
        Iterate over every anchor of this transition in ascending order.

        The sequence may be infinite; every call starts a fresh iteration.
        """
        if self.recurrence is None:
            return iter((self.anchor,))
        return iter(self.recurrence)

    def latest_anchor(self, local_time: dt.datetime) -> dt.datetime | None:
        """
        Return the last anchor not after local_time, or None if there is none.
        """
        latest = None
        for anchor in itertools.takewhile(lambda a: a <= local_time, self.anchors()):
            latest = anchor
        return latest


@dataclass(frozen=True)
class Timezone:
    """
    A VTIMEZONE: a tzid and its transitions, in declaration order.
    """

    tzid: str
    transitions: tuple[TimezoneTransition, ...] = ()

    @classmethod
    def from_component(cls, component: Component) -> Timezone:
        tzid = component.get_property("TZID")
        if tzid is None or not tzid.value:
            raise InvalidTimezoneError(f"{component.name} has no TZID")
        transitions = tuple(
            TimezoneTransition.from_component(child)
            for child in component.components
            if child.name in TRANSITION_NAMES
        )
        return cls(tzid.value, transitions)

    def resolve_offset(self, local_time: dt.datetime) -> dt.timedelta:
        """
        Return the UTC offset in effect at the naive local_time.

        The transition with the latest anchor not after local_time wins; on a
        tie the one declared later does.
        """
        if local_time.tzinfo is not None:
            raise InvalidTimezoneError(f"{local_time!r} is not a local time")
        best_anchor = offset = None
        for transition in self.transitions:
            anchor = transition.latest_anchor(local_time)
            if anchor is not None and (best_anchor is None or anchor >= best_anchor):
                best_anchor, offset = anchor, transition.offset
        if offset is None:
            raise InvalidTimezoneError(f"No transition of {self.tzid} applies at {local_time}")
        return offset

    def to_absolute(self, local_time: dt.datetime) -> dt.datetime:
        """
        Convert the naive local_time to an aware UTC datetime.
        """
        offset = self.resolve_offset(local_time)
        try:
            return (local_time - offset).replace(tzinfo=utc)
        except OverflowError as e:
            raise InvalidTimezoneError(f"{local_time} in {self.tzid} is out of range") from e

    def __repr__(self):
        return f"<VTIMEZONE | {self.tzid}>"


class TimezoneMap(Mapping):
    """
    Read-only mapping of tzid to Timezone for one calendar.
    """

    def __init__(self, timezones=()):
        self._timezones = {}
        for timezone in timezones:
            if timezone.tzid in self._timezones:
                raise InvalidTimezoneError(f"TZID {timezone.tzid} is defined more than once")
            self._timezones[timezone.tzid] = timezone

    @classmethod
    def from_components(cls, components) -> TimezoneMap:
        return cls(Timezone.from_component(component) for component in components)

    @classmethod
    def from_calendar(cls, calendar: Component) -> TimezoneMap:
        """
        Collect every VTIMEZONE of calendar.
        """
        timezone_map = cls.from_components(calendar.get_components("VTIMEZONE"))
        logger.debug(f"Loaded timezones {sorted(timezone_map)} from {calendar.name}")
        return timezone_map

    def get_timezone(self, tzid: str) -> Timezone:
        try:
            return self._timezones[tzid]
        except KeyError as e:
            raise InvalidTimezoneError(f"Unknown TZID {tzid}") from e

    def __getitem__(self, tzid):
        return self._timezones[tzid]

    def __iter__(self):
        return iter(self._timezones)

    def __len__(self):
        return len(self._timezones)

    def __repr__(self):
        return f"<TimezoneMap | {', '.join(self._timezones)}>"
