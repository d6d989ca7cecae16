"""Split a duration in milliseconds into years, months, weeks, days, etc.

The size of a day, week, month and year is configurable so that the same
duration can be shown in calendar time (24 h days) or in working time
(8 h days, 5 day weeks, ...).
"""

from __future__ import annotations

import math

from pclock.models import TimeParams

SECOND_MS = 1000
MINUTE_MS = 60 * SECOND_MS
HOUR_MS = 60 * MINUTE_MS

# the mean length of a Gregorian year is 365.2425 days
CALENDAR = TimeParams(day=24, week=7, month=365.2425 / 12, year=365.2425)
WORK = TimeParams(day=8, week=5, month=20, year=52 * 5)

_UNITS = ("years", "months", "weeks", "days", "hours", "minutes", "seconds")

_ABBREVIATIONS = {
    "years": "y",
    "months": "mo",
    "weeks": "wk",
    "days": "d",
    "hours": "h",
    "hours_total": "h",
    "days_total": "d",
    "minutes": "min",
    "seconds": "s",
}


def _plural(term: str, number: int) -> str:
    return f"{number} {term}" if number != 1 else f"1 {term[:-1]}"


def _join_list(parts: list[str]) -> str:
    if len(parts) < 2:
        return "".join(parts)
    return ", ".join(parts[:-1]) + " and " + parts[-1]


class TimePeriod:
    """A duration broken into parts and totals.

    Parts (``years`` ... ``milliseconds``) are what remains after the larger
    units have been subtracted; totals (``days_total`` ...) are whole units in
    the entire period.
    """

    CALENDAR = CALENDAR
    WORK = WORK

    def __init__(self, milliseconds: float, time_params: TimeParams | None = None) -> None:
        params = time_params or CALENDAR
        self.time_params = params

        # rounded to a microsecond so fractional factors do not leak float error into the parts
        day_ms = round(params.day * HOUR_MS, 3)
        week_ms = round(params.week * day_ms, 3)
        month_ms = round(params.month * day_ms, 3)
        year_ms = round(params.year * day_ms, 3)

        total = abs(milliseconds)
        self.milliseconds_total = milliseconds
        self.years_total = math.floor(total / year_ms)
        self.months_total = math.floor(total / month_ms)
        self.weeks_total = math.floor(total / week_ms)
        self.days_total = math.floor(total / day_ms)
        self.hours_total = math.floor(total / HOUR_MS)
        self.minutes_total = math.floor(total / MINUTE_MS)
        self.seconds_total = math.floor(total / SECOND_MS)

        rest = total
        parts = {}
        for name, unit_ms in (
            ("years", year_ms),
            ("months", month_ms),
            ("weeks", week_ms),
            ("days", day_ms),
            ("hours", HOUR_MS),
            ("minutes", MINUTE_MS),
            ("seconds", SECOND_MS),
        ):
            count = math.floor(rest / unit_ms)
            rest -= count * unit_ms
            parts[name] = count

        self.years = parts["years"]
        self.months = parts["months"]
        self.weeks = parts["weeks"]
        self.days = parts["days"]
        self.hours = parts["hours"]
        self.minutes = parts["minutes"]
        self.seconds = parts["seconds"]
        self.milliseconds = math.floor(rest)

    def __repr__(self) -> str:
        return f"TimePeriod({self.milliseconds_total!r}, {self.time_params!r})"

    def _keys(self, include_seconds: bool) -> list[str]:
        return list(_UNITS) if include_seconds else list(_UNITS[:-1])

    def _non_zero(self, keys: list[str]) -> list[str]:
        return [k for k in keys if getattr(self, k) != 0]

    # ── Formatters ────────────────────────────────────────────

    def long_str(self, include_seconds: bool = False) -> str:
        """'1 year, 2 months, 3 weeks, 4 days, 5 hours and 6 minutes'"""
        keys = self._non_zero(self._keys(include_seconds))
        return _join_list([_plural(k, getattr(self, k)) for k in keys])

    def short_str(self, include_seconds: bool = False) -> str:
        """'1 y, 2 mo, 3 wk, 4 d, 5 h and 6 min'"""
        keys = self._non_zero(self._keys(include_seconds))
        return _join_list([f"{getattr(self, k)} {_ABBREVIATIONS[k]}" for k in keys])

    def narrow_str(self, include_seconds: bool = False) -> str:
        """'1y 2mo 3wk 4d 5h 6min'"""
        return self._narrow(self._keys(include_seconds))

    def digital_str(self, include_seconds: bool = False) -> str:
        """'01:02:03:04:05:06'"""
        return ":".join(f"{getattr(self, k):02d}" for k in self._keys(include_seconds))

    def hours_and_minutes_str(self, include_seconds: bool = False) -> str:
        keys = ["hours_total", "minutes"] + (["seconds"] if include_seconds else [])
        return self._narrow(keys)

    def days_hours_and_minutes_str(self, include_seconds: bool = False) -> str:
        keys = ["days_total", "hours", "minutes"] + (["seconds"] if include_seconds else [])
        return self._narrow(keys)

    def _narrow(self, keys: list[str]) -> str:
        return " ".join(f"{getattr(self, k)}{_ABBREVIATIONS[k]}" for k in self._non_zero(keys))

    def conversion_rates_str(self) -> str:
        """'d=8h, wk=5d, mo=20d, y=52wk'"""
        p = self.time_params
        return f"d={p.day:g}h, wk={p.week:g}d, mo={p.month:g}d, y={p.year / p.week:g}wk"

    def conversion_rate_day_str(self) -> str:
        return f"d={self.time_params.day:g}h"
