"""
vtime: iCalendar value parsing and time range resolution

Description
-----------

Parses iCalendar (RFC 5545) property values into typed Python values,
resolves local date-times against the VTIMEZONE definitions of a calendar and
combines DTSTART, DTEND and DURATION into one normalized event time range.

Requirements
------------

Requires python 3.9 or later and dateutil 2.7.0 or later.
"""

from setuptools import setup, find_packages

doclines = (__doc__ or '').splitlines()

setup(name = "vtime",
      author = "vtime contributors",
      license = "Apache",
      zip_safe = True,
      include_package_data = True,
      install_requires=["python-dateutil >= 2.7.0"],
      extras_require={
          "test": ["pytest", "pytz"],
      },
      python_requires=">=3.9",
      platforms = ["any"],
      packages = find_packages(exclude=["tests", "tests.*"]),
      version = "0.1.0",
      description = "Parse iCalendar values and resolve VTIMEZONE-aware "
                    "event time ranges",
      long_description = "\n".join(doclines[2:]),
      keywords = ['icalendar', 'ics', 'vtimezone', 'rrule', 'duration'],
      test_suite="tests",
      classifiers =  """
      Development Status :: 4 - Beta
      Intended Audience :: Developers
      License :: OSI Approved :: Apache Software License
      Natural Language :: English
      Operating System :: OS Independent
      Programming Language :: Python
      Programming Language :: Python :: 3
      Topic :: Text Processing""".strip().splitlines()
      )
