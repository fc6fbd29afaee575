import datetime as dt

import pytest

from vtime.exceptions import InvalidDateTimeError, TypeDecodeError, VTimeError
from vtime.recurrence import RecurrenceDescriptor
from vtime.registry import (
    decode_property,
    decode_property_list,
    get_value_type,
    parse_date_or_date_time,
    register_value_type,
)
from vtime.values import DateTimeValue, Period

from .common import make_property, one_hour


def test_default_value_types():
    assert get_value_type("DTSTART") == "DATE-TIME"
    assert get_value_type("dtend") == "DATE-TIME"
    assert get_value_type("DURATION") == "DURATION"
    assert get_value_type("TZOFFSETTO") == "UTC-OFFSET"
    assert get_value_type("RRULE") == "RECUR"
    assert get_value_type("SUMMARY") == "TEXT"
    assert get_value_type("X-UNKNOWN") == "TEXT"


def test_decode_with_defaults():
    assert decode_property(make_property("DURATION", "PT1H")) == one_hour
    assert decode_property(make_property("TZOFFSETFROM", "-0500")) == dt.timedelta(hours=-5)
    assert decode_property(make_property("SEQUENCE", "2")) == 2
    assert decode_property(make_property("SUMMARY", "Team meeting")) == "Team meeting"
    assert isinstance(decode_property(make_property("RRULE", "FREQ=DAILY")), RecurrenceDescriptor)


def test_decode_reads_tzid():
    prop = make_property("DTSTART", "20240101T090000", TZID="Europe/Berlin")
    assert decode_property(prop) == DateTimeValue.local(dt.datetime(2024, 1, 1, 9), "Europe/Berlin")


def test_value_param_overrides_default():
    prop = make_property("X-REMINDER", "PT15M", VALUE="DURATION")
    assert decode_property(prop) == dt.timedelta(minutes=15)
    prop = make_property("DTSTART", "20240101", VALUE="date")
    assert decode_property(prop) == dt.date(2024, 1, 1)


def test_explicit_value_type_wins():
    prop = make_property("DTSTART", "20240101", VALUE="DATE-TIME")
    assert decode_property(prop, "DATE") == dt.date(2024, 1, 1)


def test_unknown_value_type():
    with pytest.raises(TypeDecodeError) as exc_info:
        decode_property(make_property("DTSTART", "20240101", VALUE="X-FANCY"))
    assert exc_info.value.value_type == "X-FANCY"


def test_missing_value():
    with pytest.raises(InvalidDateTimeError):
        decode_property(make_property("DTSTART"))


def test_binary_needs_base64_encoding():
    assert decode_property(make_property("ATTACH", "aGVsbG8=", VALUE="BINARY", ENCODING="BASE64")) == b"hello"
    with pytest.raises(TypeDecodeError):
        decode_property(make_property("ATTACH", "aGVsbG8=", VALUE="BINARY"))


def test_errors_carry_line_number():
    prop = make_property("DTSTART", "20241301T090000")
    prop.line_number = 12
    with pytest.raises(InvalidDateTimeError) as exc_info:
        decode_property(prop)
    assert exc_info.value.line_number == 12
    assert str(exc_info.value).startswith("At line 12:")


def test_register_value_type():
    register_value_type("x-vtime-test-due", "date-time")
    assert get_value_type("X-VTIME-TEST-DUE") == "DATE-TIME"
    assert decode_property(make_property("X-VTIME-TEST-DUE", "20240101T090000Z")).value.hour == 9
    with pytest.raises(VTimeError):
        register_value_type("X-VTIME-TEST-DUE", "NOT-A-TYPE")


def test_decode_property_list():
    prop = make_property("RDATE", "19970714T123000Z,19970715T123000Z")
    assert decode_property_list(prop) == [
        DateTimeValue.from_utc(dt.datetime(1997, 7, 14, 12, 30)),
        DateTimeValue.from_utc(dt.datetime(1997, 7, 15, 12, 30)),
    ]
    prop = make_property("EXDATE", "19970714,19970716", VALUE="DATE")
    assert decode_property_list(prop) == [dt.date(1997, 7, 14), dt.date(1997, 7, 16)]
    prop = make_property("RDATE", "19970101T180000Z/PT5H,19970102T180000Z/PT5H", VALUE="PERIOD")
    periods = decode_property_list(prop)
    assert all(isinstance(period, Period) for period in periods)
    assert periods[1].duration == 5 * one_hour


def test_decode_property_list_single_value_types():
    # commas are not list separators in a TEXT value
    assert decode_property_list(make_property("SUMMARY", "lunch, then coffee")) == ["lunch, then coffee"]


def test_parse_date_or_date_time():
    assert parse_date_or_date_time(make_property("DTSTART", "20240101")) == dt.date(2024, 1, 1)
    assert parse_date_or_date_time(make_property("DTSTART", "20240101T090000")) == DateTimeValue.floating(
        dt.datetime(2024, 1, 1, 9)
    )
    assert parse_date_or_date_time(make_property("DTSTART", "20240101", VALUE="DATE")) == dt.date(2024, 1, 1)


def test_parse_date_or_date_time_honours_value():
    with pytest.raises(InvalidDateTimeError):
        parse_date_or_date_time(make_property("DTSTART", "20240101", VALUE="DATE-TIME"))
    with pytest.raises(TypeDecodeError):
        parse_date_or_date_time(make_property("DTSTART", "20240101T090000", VALUE="DATE"))
    with pytest.raises(TypeDecodeError):
        parse_date_or_date_time(make_property("DTSTART", "PT1H", VALUE="DURATION"))


def test_parse_date_or_date_time_invalid():
    with pytest.raises(InvalidDateTimeError):
        parse_date_or_date_time(make_property("DTSTART", "20240230"))
