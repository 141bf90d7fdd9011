from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ask_sdk_core.api_client import DefaultApiClient
from ask_sdk_model.services import ApiClient
from ask_sdk_core.attributes_manager import AbstractPersistenceAdapter
from ask_sdk_core.skill_builder import CustomSkillBuilder
from ask_sdk_s3.adapter import S3Adapter

from cakewalk.config_store import load_config
from cakewalk.device_time import Clock, system_clock
from cakewalk.models import SkillConfig
from cakewalk.settings import Settings, load_settings
from cakewalk.skill_handlers import (
    CatchAllExceptionHandler,
    HandlerDependencies,
    LoadBirthdayInterceptor,
    build_request_handlers,
)

LOGGER = logging.getLogger(__name__)

LambdaHandler = Callable[[dict[str, Any], Any], dict[str, Any]]

_LAMBDA_HANDLER: LambdaHandler | None = None


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # the Lambda runtime installs its own root handler, which makes basicConfig a no-op
    logging.getLogger().setLevel(level)


def build_persistence_adapter(settings: Settings) -> S3Adapter:
    return S3Adapter(
        bucket_name=settings.s3_persistence_bucket,
        path_prefix=settings.s3_persistence_prefix,
    )


def build_skill_builder(
    config: SkillConfig,
    persistence_adapter: AbstractPersistenceAdapter,
    *,
    clock: Clock = system_clock,
    api_client: ApiClient | None = None,
) -> CustomSkillBuilder:
    skill_builder = CustomSkillBuilder(
        persistence_adapter=persistence_adapter,
        api_client=api_client,
    )

    deps = HandlerDependencies(config=config, clock=clock)
    for handler in build_request_handlers(deps):
        skill_builder.add_request_handler(handler)

    skill_builder.add_global_request_interceptor(LoadBirthdayInterceptor())
    skill_builder.add_exception_handler(CatchAllExceptionHandler())
    return skill_builder


def create_lambda_handler() -> LambdaHandler:
    settings = load_settings()
    configure_logging(settings.log_level)

    config = load_config(settings.skill_config_path)
    LOGGER.info(
        "Starting %s skill (leap day rule %s, bucket %s)",
        config.skill_name,
        config.leap_day_rule,
        settings.s3_persistence_bucket,
    )

    skill_builder = build_skill_builder(
        config,
        build_persistence_adapter(settings),
        api_client=DefaultApiClient(),
    )
    return skill_builder.lambda_handler()


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    global _LAMBDA_HANDLER
    if _LAMBDA_HANDLER is None:
        _LAMBDA_HANDLER = create_lambda_handler()
    return _LAMBDA_HANDLER(event, context)
