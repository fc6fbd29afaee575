"""Property name to value type registry, and decoding of whole properties"""

from __future__ import annotations

import datetime as dt

from .base import Property
from .exceptions import InvalidDateError, TypeDecodeError, VTimeError, decode_error
from .helper import logger
from .helper.constants import ValueType
from .recurrence import parse_recurrence
from .values import (
    DateTimeValue,
    parse_binary,
    parse_boolean,
    parse_cal_address,
    parse_date,
    parse_date_time,
    parse_duration,
    parse_float,
    parse_integer,
    parse_period,
    parse_text,
    parse_time,
    parse_uri,
    parse_utc_offset,
)

_parsers = {
    ValueType.BINARY: parse_binary,
    ValueType.BOOLEAN: parse_boolean,
    ValueType.CAL_ADDRESS: parse_cal_address,
    ValueType.DATE: parse_date,
    ValueType.DATE_TIME: parse_date_time,
    ValueType.DURATION: parse_duration,
    ValueType.FLOAT: parse_float,
    ValueType.INTEGER: parse_integer,
    ValueType.PERIOD: parse_period,
    ValueType.RECUR: parse_recurrence,
    ValueType.TEXT: parse_text,
    ValueType.TIME: parse_time,
    ValueType.URI: parse_uri,
    ValueType.UTC_OFFSET: parse_utc_offset,
}

# value types whose grammar reads the TZID parameter
_tzid_value_types = (ValueType.TIME, ValueType.DATE_TIME, ValueType.PERIOD)

# value types a comma separated property value may list several of
_list_value_types = (ValueType.DATE, ValueType.DATE_TIME, ValueType.PERIOD)

# --------------------------- value type registry ------------------------------
__value_type_registry = {}


def register_value_type(name, value_type):
    """
    Register value_type as the default for properties called name.
    """
    value_type = value_type.upper()
    if value_type not in _parsers:
        raise VTimeError(f"No grammar for value type {value_type!s}")
    __value_type_registry[name.upper()] = value_type


def get_value_type(name):
    """
    Return the registered default value type of name, TEXT if there is none.
    """
    return __value_type_registry.get(name.upper(), ValueType.TEXT)


def _register_all(value_type, names):
    for name in names:
        register_value_type(name, value_type)


_register_all(ValueType.DATE_TIME, ["DTSTART", "DTEND", "DUE", "RECURRENCE-ID", "RDATE", "EXDATE"])
_register_all(ValueType.DATE_TIME, ["DTSTAMP", "CREATED", "LAST-MODIFIED", "COMPLETED"])
_register_all(ValueType.DURATION, ["DURATION", "TRIGGER"])
_register_all(ValueType.UTC_OFFSET, ["TZOFFSETTO", "TZOFFSETFROM"])
_register_all(ValueType.RECUR, ["RRULE", "EXRULE"])
_register_all(ValueType.PERIOD, ["FREEBUSY"])
_register_all(ValueType.URI, ["ATTACH", "TZURL", "URL"])
_register_all(ValueType.CAL_ADDRESS, ["ORGANIZER", "ATTENDEE"])
_register_all(ValueType.INTEGER, ["PERCENT-COMPLETE", "PRIORITY", "SEQUENCE", "REPEAT"])


# ----------------------- Decoding properties ----------------------------------
def _resolve_value_type(prop: Property, value_type=None) -> str:
    value_type = (value_type or getattr(prop, "value_param", None) or get_value_type(prop.name)).upper()
    if value_type not in _parsers:
        raise TypeDecodeError(value_type, f"Unknown value type {value_type!s} for {prop.name}", prop.line_number)
    if prop.value is None:
        raise decode_error(value_type, f"{prop.name} has no value", prop.line_number)
    if value_type == ValueType.BINARY and getattr(prop, "encoding_param", "").upper() != "BASE64":
        raise TypeDecodeError(value_type, f"BINARY {prop.name} must have ENCODING=BASE64", prop.line_number)
    return value_type


def _decode_text(prop: Property, value_type, text):
    parser = _parsers[value_type]
    try:
        if value_type in _tzid_value_types:
            return parser(text, getattr(prop, "tzid_param", None))
        return parser(text)
    except VTimeError as e:
        e.line_number = prop.line_number
        raise


def decode_property(prop: Property, value_type=None):
    """
    Decode prop.value into its typed value.

    The value type is value_type if given, else the VALUE parameter, else the
    default registered for the property name.
    """
    value_type = _resolve_value_type(prop, value_type)
    return _decode_text(prop, value_type, prop.value)


def decode_property_list(prop: Property, value_type=None) -> list:
    """
    Decode a property holding comma separated values, like RDATE or EXDATE.
    """
    value_type = _resolve_value_type(prop, value_type)
    if value_type not in _list_value_types:
        return [_decode_text(prop, value_type, prop.value)]
    return [_decode_text(prop, value_type, text) for text in prop.value.split(",")]


def parse_date_or_date_time(prop: Property) -> dt.date | DateTimeValue:
    """
    Convert a property's value into a date or a DateTimeValue.

    The VALUE parameter decides. A variety of clients don't serialize dates
    with the appropriate VALUE parameter, so without one both varieties are
    tried, DATE first.
    """
    value_type = getattr(prop, "value_param", None)
    if value_type is not None:
        value_type = value_type.upper()
        if value_type not in (ValueType.DATE, ValueType.DATE_TIME):
            raise TypeDecodeError(value_type, f"{prop.name} must be a DATE or DATE-TIME", prop.line_number)
        return decode_property(prop, value_type)

    try:
        return decode_property(prop, ValueType.DATE)
    except InvalidDateError:
        logger.debug(f"{prop.name} is not a DATE, trying DATE-TIME")
        return decode_property(prop, ValueType.DATE_TIME)
