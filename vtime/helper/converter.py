from __future__ import annotations

from .imports_ import lru_cache


def to_list(string_or_list) -> list:
    return [string_or_list] if isinstance(string_or_list, str) else list(string_or_list)


def num_to_digits(num: int, places: int) -> str:
    """
    Helper, for converting numbers to zero padded textual digits.
    """
    s = str(num)
    if len(s) < places:
        return ("0" * (places - len(s))) + s
    return s


@lru_cache(32)
def to_vname(name, strip_num=0, upper=False) -> str:
    """
    Turn a Python name into an iCalendar style name,
    optionally uppercase and with characters stripped off.
    """
    if upper:
        name = name.upper()
    if strip_num != 0:
        name = name[:-strip_num]
    return name.replace("_", "-")
