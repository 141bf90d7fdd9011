from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ask_sdk_core.exceptions import ApiClientException
from ask_sdk_core.handler_input import HandlerInput
from ask_sdk_core.utils import get_device_id
from ask_sdk_model.services import ServiceException

LOGGER = logging.getLogger(__name__)

Clock = Callable[[tzinfo], datetime]


class TimeZoneLookupError(Exception):
    pass


def system_clock(tz: tzinfo) -> datetime:
    return datetime.now(tz)


def lookup_time_zone(handler_input: HandlerInput) -> str:
    try:
        # the SDK raises ValueError rather than returning None without an api client
        factory = handler_input.service_client_factory
    except ValueError as exc:
        raise TimeZoneLookupError("No service client factory; is the API client configured?") from exc
    if factory is None:
        raise TimeZoneLookupError("No service client factory; is the API client configured?")

    device_id = get_device_id(handler_input)
    if not device_id:
        raise TimeZoneLookupError("Request carries no device id")

    try:
        time_zone = factory.get_ups_service().get_system_time_zone(device_id)
    except (ServiceException, ApiClientException) as exc:
        raise TimeZoneLookupError(f"Settings service error: {exc}") from exc

    if not time_zone:
        raise TimeZoneLookupError("Settings service returned no time zone")
    return str(time_zone)


def local_date(time_zone: str, *, clock: Clock = system_clock) -> date:
    try:
        tz = ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise TimeZoneLookupError(f"Unknown time zone: {time_zone}") from exc
    return clock(tz).date()


def resolve_reference_date(handler_input: HandlerInput, *, clock: Clock = system_clock) -> date | None:
    try:
        time_zone = lookup_time_zone(handler_input)
        return local_date(time_zone, clock=clock)
    except TimeZoneLookupError as exc:
        LOGGER.warning("Could not resolve the user's local date: %s", exc)
        return None
