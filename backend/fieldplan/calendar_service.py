"""Week arithmetic and German national holidays for the planning board."""

from __future__ import annotations

import calendar
import datetime as dt
from dataclasses import dataclass
from typing import Dict, List, Optional

FIXED_HOLIDAYS = (
    (1, 1, "Neujahr"),
    (5, 1, "Tag der Arbeit"),
    (10, 3, "Tag der Deutschen Einheit"),
    (12, 25, "1. Weihnachtstag"),
    (12, 26, "2. Weihnachtstag"),
)

EASTER_OFFSETS = (
    (-2, "Karfreitag"),
    (1, "Ostermontag"),
    (39, "Christi Himmelfahrt"),
    (50, "Pfingstmontag"),
)


@dataclass(slots=True)
class CalendarDay:
    date: dt.date
    iso_week: int
    weekday: int
    holiday: Optional[str] = None

    @property
    def is_weekend(self) -> bool:
        return self.weekday >= 5


def monday_of(day: dt.date) -> dt.date:
    return day - dt.timedelta(days=day.weekday())


def iso_week_number(day: dt.date) -> int:
    return day.isocalendar()[1]


def add_weeks(day: dt.date, weeks: int) -> dt.date:
    return day + dt.timedelta(weeks=weeks)


def easter_sunday(year: int) -> dt.date:
    """Easter Sunday of a Gregorian year (Gauss, anonymous Gregorian form)."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return dt.date(year, month, day + 1)


def holidays_for_year(year: int) -> Dict[str, str]:
    holidays: Dict[str, str] = {}
    for month, day, name in FIXED_HOLIDAYS:
        holidays[dt.date(year, month, day).isoformat()] = name
    easter = easter_sunday(year)
    for offset, name in EASTER_OFFSETS:
        holidays[(easter + dt.timedelta(days=offset)).isoformat()] = name
    return holidays


def holidays_between(start: dt.date, end: dt.date) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for year in range(start.year, end.year + 1):
        for key, name in holidays_for_year(year).items():
            if start.isoformat() <= key <= end.isoformat():
                result[key] = name
    return dict(sorted(result.items()))


def _calendar_days(start: dt.date, count: int) -> List[CalendarDay]:
    end = start + dt.timedelta(days=max(count, 1) - 1)
    holidays = holidays_between(start, end)
    days: List[CalendarDay] = []
    for offset in range(count):
        current = start + dt.timedelta(days=offset)
        days.append(
            CalendarDay(
                date=current,
                iso_week=iso_week_number(current),
                weekday=current.weekday(),
                holiday=holidays.get(current.isoformat()),
            )
        )
    return days


def week_days(day: dt.date, days: int = 5) -> List[CalendarDay]:
    """Working-week rows starting at the Monday of ``day``."""
    return _calendar_days(monday_of(day), days)


def month_days(year: int, month: int) -> List[CalendarDay]:
    _first_weekday, length = calendar.monthrange(year, month)
    return _calendar_days(dt.date(year, month, 1), length)


def next_weekday(day: dt.date, weekday: int) -> dt.date:
    """The next date on ``weekday`` (0 = Monday), ``day`` itself included."""
    return day + dt.timedelta(days=(weekday - day.weekday()) % 7)
