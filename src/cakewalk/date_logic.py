from __future__ import annotations

from datetime import date, datetime

from cakewalk.models import DEFAULT_LEAP_DAY_RULE, DEFAULT_MIN_BIRTH_YEAR, BirthDate, NextOccurrence

LEAP_DAY_RULES = {"feb28", "mar1"}


class InvalidDateError(ValueError):
    pass


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def calendar_date(year: int, month: int, day: int) -> date:
    if any(isinstance(part, bool) or not isinstance(part, int) for part in (year, month, day)):
        raise InvalidDateError(f"Date parts must be integers: {year!r}-{month!r}-{day!r}")

    if month < 1 or month > 12:
        raise InvalidDateError(f"Invalid month: {month}")

    if day < 1 or day > 31:
        raise InvalidDateError(f"Invalid day: {day}")

    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date: {year:04d}-{month:02d}-{day:02d}") from exc


def validate_birth_date(birth_date: BirthDate, *, min_year: int = DEFAULT_MIN_BIRTH_YEAR) -> date:
    born = calendar_date(birth_date.year, birth_date.month, birth_date.day)
    if born.year < min_year:
        raise InvalidDateError(f"Birth year must be {min_year} or later: {born.year}")
    return born


def anniversary_for_year(birth_date: BirthDate, year: int, leap_day_rule: str) -> date:
    if birth_date.month == 2 and birth_date.day == 29 and not is_leap_year(year):
        if leap_day_rule == "mar1":
            return date(year, 3, 1)
        if leap_day_rule == "feb28":
            return date(year, 2, 28)
        raise InvalidDateError(f"Unsupported leap day rule: {leap_day_rule}")
    return calendar_date(year, birth_date.month, birth_date.day)


def _as_calendar_date(reference_date: date) -> date:
    # datetime is a date subclass; only the calendar part counts
    if isinstance(reference_date, datetime):
        return reference_date.date()
    if not isinstance(reference_date, date):
        raise InvalidDateError(f"Reference date must be a date: {reference_date!r}")
    return reference_date


def compute_next_occurrence(
    birth_date: BirthDate,
    reference_date: date,
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
    *,
    min_year: int = DEFAULT_MIN_BIRTH_YEAR,
) -> NextOccurrence:
    """Find the next anniversary of ``birth_date`` on or after ``reference_date``.

    Feb 29 birthdays fall on Mar 1 (``"mar1"``) or Feb 28 (``"feb28"``) in
    non-leap years. The day count is an ordinal difference, so time of day and
    DST never shift it.
    """
    if leap_day_rule not in LEAP_DAY_RULES:
        raise InvalidDateError(f"Unsupported leap day rule: {leap_day_rule}")

    today = _as_calendar_date(reference_date)
    born = validate_birth_date(birth_date, min_year=min_year)
    if born > today:
        raise InvalidDateError(
            f"Birth date {born.isoformat()} is after reference date {today.isoformat()}"
        )

    anniversary = anniversary_for_year(birth_date, today.year, leap_day_rule)
    if anniversary < today:
        anniversary = anniversary_for_year(birth_date, today.year + 1, leap_day_rule)

    days_until = anniversary.toordinal() - today.toordinal()
    return NextOccurrence(
        age_reached=anniversary.year - born.year,
        days_until=days_until,
        is_today=days_until == 0,
        anniversary=anniversary,
    )
