import datetime as dt

from vtime.base import Component, Property

one_hour = dt.timedelta(hours=1)


def make_property(name, value=None, **params):
    """Helper to build a Property, params given as TZID="...", VALUE="..."."""
    return Property(name, value, {key.replace("_", "-"): val for key, val in params.items()})


def make_transition(name, dtstart, offset_to, *lines):
    """Helper to build a STANDARD or DAYLIGHT block, extra lines as (name, value) pairs."""
    props = [make_property("DTSTART", dtstart), make_property("TZOFFSETTO", offset_to)]
    props.extend(make_property(line_name, value) for line_name, value in lines)
    return Component(name, props)


def make_vtimezone(tzid, *transitions):
    return Component("VTIMEZONE", [make_property("TZID", tzid)], transitions)


def new_york():
    return make_vtimezone(
        "America/New_York",
        make_transition("DAYLIGHT", "20070311T020000", "-0400", ("RRULE", "FREQ=YEARLY;BYMONTH=3;BYDAY=2SU")),
        make_transition("STANDARD", "20071104T020000", "-0500", ("RRULE", "FREQ=YEARLY;BYMONTH=11;BYDAY=1SU")),
    )


def berlin():
    return make_vtimezone(
        "Europe/Berlin",
        make_transition("DAYLIGHT", "19810329T020000", "+0200", ("RRULE", "FREQ=YEARLY;BYMONTH=3;BYDAY=-1SU")),
        make_transition("STANDARD", "19961027T030000", "+0100", ("RRULE", "FREQ=YEARLY;BYMONTH=10;BYDAY=-1SU")),
    )
