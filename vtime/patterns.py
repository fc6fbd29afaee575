# Value grammars of RFC 5545 section 3.3. Digits are spelled [0-9] so that
# non-ASCII digits never match.
patterns = {
    "date": "(?P<year>[0-9]{4})(?P<month>[0-9]{2})(?P<day>[0-9]{2})",
    "time": "(?P<hour>[0-9]{2})(?P<minute>[0-9]{2})(?P<second>[0-9]{2})(?P<utc>Z)?",
    "utc_offset": "(?P<sign>[+-])(?P<hours>[0-9]{2})(?P<minutes>[0-9]{2})(?P<seconds>[0-9]{2})?",
    "integer": "[+-]?[0-9]+",
    "float": r"[+-]?[0-9]+(?:\.[0-9]+)?",
}

# dur-value: the sign and the "P" prefix, then exactly one of dur-date,
# dur-time or dur-week. {number!s} is replaced with an unbounded digit run.
patterns["number"] = "[0-9]+"
patterns["duration"] = "(?P<sign>[+-])?P(?P<body>.*)"
patterns["dur_week"] = "(?P<weeks>{number!s})W".format(**patterns)
patterns["dur_day"] = "(?P<days>{number!s})D(?P<time>T.*)?".format(**patterns)

# dur-time: hours may be followed by minutes and minutes by seconds, never
# hours directly by seconds. That nesting is checked after matching.
patterns["dur_time"] = (
    r"""
T
(?: (?P<hours> {number!s}) H )?
(?: (?P<minutes> {number!s}) M )?
(?: (?P<seconds> {number!s}) S )?
""".format(
        **patterns
    )
)

# recur-rule-part BYDAY item, e.g. "-1SU", "+2MO", "FR"
patterns["weekday_num"] = "(?P<ordinal>[+-]?[0-9]{1,2})?(?P<weekday>MO|TU|WE|TH|FR|SA|SU)"

# generic URI syntax of RFC 3986: a scheme, a colon, then only URI characters
# with well-formed percent escapes
patterns["uri_char"] = r"[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=]"
patterns["uri"] = "[A-Za-z][A-Za-z0-9+.-]*:(?:{uri_char!s}|%[0-9A-Fa-f]{{2}})*".format(**patterns)
