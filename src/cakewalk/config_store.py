from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from cakewalk.date_logic import LEAP_DAY_RULES
from cakewalk.models import DEFAULT_LEAP_DAY_RULE, DEFAULT_MIN_BIRTH_YEAR, DEFAULT_SKILL_NAME, SkillConfig

LOGGER = logging.getLogger(__name__)


def _parse_min_birth_year(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("min_birth_year must be an integer")
    if value < 1 or value > 9999:
        raise ValueError("min_birth_year must be between 1 and 9999")
    return value


def validate_config(config: SkillConfig) -> SkillConfig:
    skill_name = config.skill_name.strip()
    if not skill_name:
        raise ValueError("skill_name must not be empty")

    leap_day_rule = config.leap_day_rule.strip().lower()
    if leap_day_rule not in LEAP_DAY_RULES:
        raise ValueError(f"leap_day_rule must be one of {sorted(LEAP_DAY_RULES)}")

    return SkillConfig(
        skill_name=skill_name,
        leap_day_rule=leap_day_rule,
        min_birth_year=_parse_min_birth_year(config.min_birth_year),
    )


def load_config(path: Path) -> SkillConfig:
    if not path.exists():
        LOGGER.info("No skill config at %s, using defaults", path)
        return SkillConfig()

    with path.open("rb") as file_obj:
        data = tomllib.load(file_obj)

    config = SkillConfig(
        skill_name=str(data.get("skill_name", DEFAULT_SKILL_NAME)),
        leap_day_rule=str(data.get("leap_day_rule", DEFAULT_LEAP_DAY_RULE)),
        min_birth_year=data.get("min_birth_year", DEFAULT_MIN_BIRTH_YEAR),
    )
    return validate_config(config)
