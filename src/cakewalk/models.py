from __future__ import annotations

from dataclasses import dataclass
from datetime import date


DEFAULT_SKILL_NAME = "cakewalk"
DEFAULT_LEAP_DAY_RULE = "mar1"
DEFAULT_MIN_BIRTH_YEAR = 1900


@dataclass(frozen=True)
class BirthDate:
    year: int
    month: int
    day: int


@dataclass(frozen=True)
class NextOccurrence:
    age_reached: int
    days_until: int
    is_today: bool
    anniversary: date


@dataclass(frozen=True)
class SkillConfig:
    skill_name: str = DEFAULT_SKILL_NAME
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE
    min_birth_year: int = DEFAULT_MIN_BIRTH_YEAR
