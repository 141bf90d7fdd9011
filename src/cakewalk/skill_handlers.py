from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta, timezone

from ask_sdk_core.dispatch_components import (
    AbstractExceptionHandler,
    AbstractRequestHandler,
    AbstractRequestInterceptor,
)
from ask_sdk_core.handler_input import HandlerInput
from ask_sdk_core.utils import get_slot, is_intent_name, is_request_type
from ask_sdk_model import Response

from cakewalk.birthday_store import (
    birth_date_from_attributes,
    birth_date_from_slots,
    birth_date_to_attributes,
    has_birth_date,
)
from cakewalk.date_logic import (
    InvalidDateError,
    calendar_date,
    compute_next_occurrence,
    validate_birth_date,
)
from cakewalk.device_time import Clock, resolve_reference_date, system_clock
from cakewalk.models import BirthDate, SkillConfig
from cakewalk.speech import (
    BIRTHDAY_PROMPT,
    BIRTHDAY_REPROMPT,
    DID_NOT_UNDERSTAND,
    GOODBYE,
    SERVICE_PROBLEM,
    render_captured,
    render_countdown,
    render_fallback,
    render_help,
    render_invalid_birthday,
    render_welcome,
)

LOGGER = logging.getLogger(__name__)

CAPTURE_BIRTHDAY_INTENT = "GetBirthdayIntent"
COUNTDOWN_INTENT = "GetCountdownIntent"


@dataclass(frozen=True)
class HandlerDependencies:
    config: SkillConfig
    clock: Clock = system_clock


def _session_attributes(handler_input: HandlerInput) -> dict:
    if handler_input.request_envelope.session is None:
        return {}
    return handler_input.attributes_manager.session_attributes


def _slot_value(handler_input: HandlerInput, slot_name: str) -> str | None:
    slot = get_slot(handler_input, slot_name)
    if slot is None:
        return None
    return slot.value


def birthday_on_file(handler_input: HandlerInput) -> bool:
    return has_birth_date(_session_attributes(handler_input))


def speak_countdown(handler_input: HandlerInput, deps: HandlerDependencies) -> Response:
    builder = handler_input.response_builder

    try:
        birth_date = birth_date_from_attributes(_session_attributes(handler_input))
    except InvalidDateError:
        LOGGER.warning("Stored birthday is unreadable")
        birth_date = None
    if birth_date is None:
        return builder.speak(render_invalid_birthday(stored=True)).ask(BIRTHDAY_REPROMPT).response

    reference_date = resolve_reference_date(handler_input, clock=deps.clock)
    if reference_date is None:
        return builder.speak(SERVICE_PROBLEM).response

    try:
        result = compute_next_occurrence(
            birth_date,
            reference_date,
            deps.config.leap_day_rule,
            min_year=deps.config.min_birth_year,
        )
    except InvalidDateError:
        LOGGER.warning("Stored birthday rejected by the calculator")
        return builder.speak(render_invalid_birthday(stored=True)).ask(BIRTHDAY_REPROMPT).response

    return builder.speak(render_countdown(result)).set_should_end_session(True).response


class HasBirthdayLaunchRequestHandler(AbstractRequestHandler):
    """Launch for a user whose birthday is already on file."""

    def __init__(self, deps: HandlerDependencies) -> None:
        self._deps = deps

    def can_handle(self, handler_input: HandlerInput) -> bool:
        return is_request_type("LaunchRequest")(handler_input) and birthday_on_file(handler_input)

    def handle(self, handler_input: HandlerInput) -> Response:
        return speak_countdown(handler_input, self._deps)


class LaunchRequestHandler(AbstractRequestHandler):
    def __init__(self, deps: HandlerDependencies) -> None:
        self._deps = deps

    def can_handle(self, handler_input: HandlerInput) -> bool:
        return is_request_type("LaunchRequest")(handler_input)

    def handle(self, handler_input: HandlerInput) -> Response:
        speech_text = render_welcome(self._deps.config.skill_name)
        return handler_input.response_builder.speak(speech_text).ask(speech_text).response


class CaptureBirthdayIntentHandler(AbstractRequestHandler):
    """Store the birthday from the year/month/day slots, replacing any earlier one."""

    def __init__(self, deps: HandlerDependencies) -> None:
        self._deps = deps

    def can_handle(self, handler_input: HandlerInput) -> bool:
        return is_intent_name(CAPTURE_BIRTHDAY_INTENT)(handler_input)

    def handle(self, handler_input: HandlerInput) -> Response:
        builder = handler_input.response_builder

        try:
            birth_date = birth_date_from_slots(
                _slot_value(handler_input, "year"),
                _slot_value(handler_input, "month"),
                _slot_value(handler_input, "day"),
            )
            validate_birth_date(birth_date, min_year=self._deps.config.min_birth_year)
        except InvalidDateError:
            LOGGER.info("Rejected birthday slots: not a valid birth date")
            return builder.speak(render_invalid_birthday()).ask(BIRTHDAY_REPROMPT).response

        born = calendar_date(birth_date.year, birth_date.month, birth_date.day)
        if born > self._latest_today(handler_input):
            LOGGER.info("Rejected birthday slots: date is in the future")
            return builder.speak(render_invalid_birthday()).ask(BIRTHDAY_REPROMPT).response

        self._save(handler_input, birth_date)
        LOGGER.info("Saved birthday %02d-%02d", birth_date.month, birth_date.day)
        return builder.speak(render_captured(birth_date)).response

    def _latest_today(self, handler_input: HandlerInput) -> date:
        today = resolve_reference_date(handler_input, clock=self._deps.clock)
        if today is not None:
            return today
        # no zone is more than a day ahead of UTC
        return self._deps.clock(timezone.utc).date() + timedelta(days=1)

    @staticmethod
    def _save(handler_input: HandlerInput, birth_date: BirthDate) -> None:
        attributes_manager = handler_input.attributes_manager
        attributes = birth_date_to_attributes(birth_date)

        attributes_manager.persistent_attributes = attributes
        attributes_manager.save_persistent_attributes()

        if handler_input.request_envelope.session is not None:
            attributes_manager.session_attributes.update(attributes)


class CountdownIntentHandler(AbstractRequestHandler):
    def __init__(self, deps: HandlerDependencies) -> None:
        self._deps = deps

    def can_handle(self, handler_input: HandlerInput) -> bool:
        return is_intent_name(COUNTDOWN_INTENT)(handler_input)

    def handle(self, handler_input: HandlerInput) -> Response:
        if birthday_on_file(handler_input):
            return speak_countdown(handler_input, self._deps)

        speech_text = f"I don't know your birthday yet. {BIRTHDAY_PROMPT}"
        return handler_input.response_builder.speak(speech_text).ask(BIRTHDAY_REPROMPT).response


class HelpIntentHandler(AbstractRequestHandler):
    def __init__(self, deps: HandlerDependencies) -> None:
        self._deps = deps

    def can_handle(self, handler_input: HandlerInput) -> bool:
        return is_intent_name("AMAZON.HelpIntent")(handler_input)

    def handle(self, handler_input: HandlerInput) -> Response:
        speech_text = render_help(self._deps.config.skill_name)
        return handler_input.response_builder.speak(speech_text).ask(BIRTHDAY_REPROMPT).response


class CancelOrStopIntentHandler(AbstractRequestHandler):
    def can_handle(self, handler_input: HandlerInput) -> bool:
        return (
            is_intent_name("AMAZON.CancelIntent")(handler_input)
            or is_intent_name("AMAZON.StopIntent")(handler_input)
        )

    def handle(self, handler_input: HandlerInput) -> Response:
        return handler_input.response_builder.speak(GOODBYE).set_should_end_session(True).response


class FallbackIntentHandler(AbstractRequestHandler):
    def can_handle(self, handler_input: HandlerInput) -> bool:
        return is_intent_name("AMAZON.FallbackIntent")(handler_input)

    def handle(self, handler_input: HandlerInput) -> Response:
        speech_text = render_fallback()
        return handler_input.response_builder.speak(speech_text).ask(speech_text).response


class SessionEndedRequestHandler(AbstractRequestHandler):
    def can_handle(self, handler_input: HandlerInput) -> bool:
        return is_request_type("SessionEndedRequest")(handler_input)

    def handle(self, handler_input: HandlerInput) -> Response:
        request = handler_input.request_envelope.request
        LOGGER.info("Session ended with reason: %s", getattr(request, "reason", None))
        error = getattr(request, "error", None)
        if error is not None:
            LOGGER.warning("Session ended with error: %s", error.message)
        return handler_input.response_builder.response


class LoadBirthdayInterceptor(AbstractRequestInterceptor):
    """Copy a complete stored birthday into the session before dispatch."""

    def process(self, handler_input: HandlerInput) -> None:
        if handler_input.request_envelope.session is None:
            return

        attributes_manager = handler_input.attributes_manager
        try:
            birth_date = birth_date_from_attributes(attributes_manager.persistent_attributes)
        except InvalidDateError:
            LOGGER.warning("Ignoring unreadable stored birthday")
            return

        if birth_date is not None:
            attributes_manager.session_attributes.update(birth_date_to_attributes(birth_date))


class CatchAllExceptionHandler(AbstractExceptionHandler):
    def can_handle(self, handler_input: HandlerInput, exception: Exception) -> bool:
        return True

    def handle(self, handler_input: HandlerInput, exception: Exception) -> Response:
        LOGGER.error("Error handled: %s", exception, exc_info=exception)
        return (
            handler_input.response_builder.speak(DID_NOT_UNDERSTAND)
            .ask(DID_NOT_UNDERSTAND)
            .response
        )


def build_request_handlers(deps: HandlerDependencies) -> list[AbstractRequestHandler]:
    # first match wins
    return [
        HasBirthdayLaunchRequestHandler(deps),
        LaunchRequestHandler(deps),
        CaptureBirthdayIntentHandler(deps),
        CountdownIntentHandler(deps),
        HelpIntentHandler(deps),
        CancelOrStopIntentHandler(),
        FallbackIntentHandler(),
        SessionEndedRequestHandler(),
    ]
