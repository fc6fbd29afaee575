""" List of all common imports except __future__ and aliases"""

import base64
import binascii
import calendar
import enum
import itertools
import re
from collections.abc import Mapping
from functools import lru_cache

__all__ = [base64, binascii, calendar, enum, itertools, re, Mapping, lru_cache]
