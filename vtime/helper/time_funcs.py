from __future__ import annotations

import datetime as dt
from dataclasses import dataclass


@dataclass
class SimpleDelta:
    """A timedelta broken into the fields of a DURATION or UTC-OFFSET."""

    negative: bool
    days: int
    hours: int
    minutes: int
    seconds: int

    @property
    def sign(self) -> str:
        return "-" if self.negative else "+"

    @property
    def has_time(self) -> bool:
        return bool(self.hours or self.minutes or self.seconds)

    @property
    def weeks(self) -> int | None:
        """The span in weeks, None unless it is a non-zero whole number of them."""
        if self.has_time or not self.days or self.days % 7:
            return None
        return self.days // 7


def split_delta(delta: dt.timedelta) -> SimpleDelta:
    """Split a timedelta into its sign and the days, hours, minutes and seconds of its magnitude."""
    magnitude = abs(delta)
    hours, seconds = divmod(magnitude.seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    return SimpleDelta(delta < dt.timedelta(0), magnitude.days, hours, minutes, seconds)
