from __future__ import annotations

import calendar
from collections.abc import Mapping
from typing import Any

from cakewalk.date_logic import InvalidDateError, calendar_date
from cakewalk.models import BirthDate

BIRTHDAY_KEYS = ("year", "month", "day")

_MONTHS_BY_NAME = {
    **{name.lower(): index for index, name in enumerate(calendar.month_name) if name},
    **{name.lower(): index for index, name in enumerate(calendar.month_abbr) if name},
}


def parse_month(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidDateError(f"Invalid month: {value!r}")
    if isinstance(value, int):
        return value

    text = str(value).strip().lower().rstrip(".")
    if text.isdigit():
        return int(text)
    if text in _MONTHS_BY_NAME:
        return _MONTHS_BY_NAME[text]
    if len(text) >= 3:
        # "sept" and other prefixes of a full month name
        for index, name in enumerate(calendar.month_name):
            if name and name.lower().startswith(text):
                return index
    raise InvalidDateError(f"Invalid month: {value!r}")


def _parse_number(value: Any, label: str) -> int:
    if isinstance(value, bool):
        raise InvalidDateError(f"Invalid {label}: {value!r}")
    if isinstance(value, int):
        return value

    text = str(value).strip()
    if not text.isdigit():
        raise InvalidDateError(f"Invalid {label}: {value!r}")
    return int(text)


def _is_blank(value: Any) -> bool:
    return value is None or value == "" or value == 0 or value == "0"


def has_birth_date(attributes: Mapping[str, Any] | None) -> bool:
    if not attributes:
        return False
    return not any(_is_blank(attributes.get(key)) for key in BIRTHDAY_KEYS)


def birth_date_from_slots(year: Any, month: Any, day: Any) -> BirthDate:
    if any(_is_blank(value) for value in (year, month, day)):
        raise InvalidDateError("Year, month and day are all required")

    birth_date = BirthDate(
        year=_parse_number(year, "year"),
        month=parse_month(month),
        day=_parse_number(day, "day"),
    )
    calendar_date(birth_date.year, birth_date.month, birth_date.day)
    return birth_date


def birth_date_from_attributes(attributes: Mapping[str, Any] | None) -> BirthDate | None:
    """Read a stored birthday, or ``None`` when any part is missing.

    Values written by older versions are raw slot strings with a spoken month
    name; both layouts are accepted. Present but unreadable values raise
    ``InvalidDateError``.
    """
    if not has_birth_date(attributes):
        return None
    return birth_date_from_slots(attributes["year"], attributes["month"], attributes["day"])


def birth_date_to_attributes(birth_date: BirthDate) -> dict[str, int]:
    return {
        "year": birth_date.year,
        "month": birth_date.month,
        "day": birth_date.day,
    }
