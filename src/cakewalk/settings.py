from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    s3_persistence_bucket: str
    s3_persistence_prefix: str | None
    skill_config_path: Path
    log_level: str


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        raise ValueError(f"Missing required environment variable: {name}")
    return value.strip()


def _optional_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def load_settings() -> Settings:
    root = Path.cwd()

    bucket = _required_env("S3_PERSISTENCE_BUCKET")
    prefix = _optional_env("S3_PERSISTENCE_PREFIX")

    skill_config_path = Path(
        os.getenv("CAKEWALK_CONFIG_PATH", root / "config" / "skill.toml")
    )
    log_level = (_optional_env("LOG_LEVEL") or "INFO").upper()

    return Settings(
        s3_persistence_bucket=bucket,
        s3_persistence_prefix=prefix,
        skill_config_path=skill_config_path,
        log_level=log_level,
    )
