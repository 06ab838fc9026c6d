from __future__ import annotations

import datetime as dt

import pytest

from fieldplan.calendar_service import (
    add_weeks,
    easter_sunday,
    holidays_between,
    holidays_for_year,
    iso_week_number,
    month_days,
    monday_of,
    next_weekday,
    week_days,
)


def test_monday_of_sunday_goes_back_six_days():
    assert monday_of(dt.date(2024, 1, 14)) == dt.date(2024, 1, 8)
    assert monday_of(dt.date(2024, 1, 8)) == dt.date(2024, 1, 8)
    assert monday_of(dt.date(2024, 1, 10)) == dt.date(2024, 1, 8)


def test_iso_week_number_year_boundaries():
    assert iso_week_number(dt.date(2024, 1, 1)) == 1
    assert iso_week_number(dt.date(2021, 1, 3)) == 53
    assert iso_week_number(dt.date(2020, 12, 31)) == 53
    assert iso_week_number(dt.date(2026, 1, 1)) == 1
    assert iso_week_number(dt.date(2024, 12, 30)) == 1


def test_iso_week_is_stable_under_monday_of():
    day = dt.date(2019, 12, 1)
    for offset in range(800):
        current = day + dt.timedelta(days=offset)
        assert iso_week_number(monday_of(current)) == iso_week_number(current)


def test_add_weeks_rolls_over_month_and_year():
    assert add_weeks(dt.date(2023, 12, 25), 1) == dt.date(2024, 1, 1)
    assert add_weeks(dt.date(2024, 3, 4), -1) == dt.date(2024, 2, 26)


@pytest.mark.parametrize(
    "year, expected",
    [
        (1583, dt.date(1583, 4, 10)),
        (1818, dt.date(1818, 3, 22)),
        (1943, dt.date(1943, 4, 25)),
        (2000, dt.date(2000, 4, 23)),
        (2019, dt.date(2019, 4, 21)),
        (2024, dt.date(2024, 3, 31)),
        (2025, dt.date(2025, 4, 20)),
        (2038, dt.date(2038, 4, 25)),
    ],
)
def test_easter_sunday_known_dates(year, expected):
    assert easter_sunday(year) == expected


def test_every_year_has_nine_holidays_and_easter_in_range():
    for year in range(1583, 2400):
        easter = easter_sunday(year)
        assert dt.date(year, 3, 22) <= easter <= dt.date(year, 4, 25)
        assert easter.weekday() == 6
        assert len(holidays_for_year(year)) == 9


def test_holidays_for_2024():
    holidays = holidays_for_year(2024)
    assert holidays["2024-01-01"] == "Neujahr"
    assert holidays["2024-03-29"] == "Karfreitag"
    assert holidays["2024-04-01"] == "Ostermontag"
    assert holidays["2024-05-09"] == "Christi Himmelfahrt"
    assert holidays["2024-05-20"] == "Pfingstmontag"
    assert holidays["2024-10-03"] == "Tag der Deutschen Einheit"
    assert holidays["2024-12-26"] == "2. Weihnachtstag"


def test_holidays_between_spans_years():
    result = holidays_between(dt.date(2023, 12, 20), dt.date(2024, 1, 5))
    assert list(result) == ["2023-12-25", "2023-12-26", "2024-01-01"]


def test_week_days_marks_holidays():
    days = week_days(dt.date(2024, 4, 3))
    assert [d.date for d in days][0] == dt.date(2024, 4, 1)
    assert len(days) == 5
    assert days[0].holiday == "Ostermontag"
    assert all(d.iso_week == 14 for d in days)
    assert not any(d.is_weekend for d in days)


def test_month_days_covers_month():
    days = month_days(2024, 2)
    assert len(days) == 29
    assert days[-1].date == dt.date(2024, 2, 29)


def test_next_weekday_includes_today():
    friday = dt.date(2024, 1, 12)
    assert next_weekday(friday, 4) == friday
    assert next_weekday(dt.date(2024, 1, 13), 4) == dt.date(2024, 1, 19)
