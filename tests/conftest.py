from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pytest
from ask_sdk_core.attributes_manager import AbstractPersistenceAdapter, AttributesManager
from ask_sdk_core.handler_input import HandlerInput
from ask_sdk_model import (
    Application,
    Context,
    Device,
    Intent,
    IntentRequest,
    LaunchRequest,
    RequestEnvelope,
    Session,
    SessionEndedReason,
    SessionEndedRequest,
    Slot,
    User,
)
from ask_sdk_model.interfaces.system import SystemState

APPLICATION_ID = "amzn1.ask.skill.cakewalk-test"
USER_ID = "amzn1.ask.account.test-user"
DEVICE_ID = "amzn1.ask.device.test-device"
REQUEST_TIME = datetime(2024, 6, 16, 12, 0, tzinfo=timezone.utc)


class InMemoryPersistenceAdapter(AbstractPersistenceAdapter):
    def __init__(self, records: dict[str, dict[str, Any]] | None = None) -> None:
        self.records = dict(records or {})
        self.save_count = 0

    def get_attributes(self, request_envelope: RequestEnvelope) -> dict[str, Any]:
        return dict(self.records.get(request_envelope.session.user.user_id, {}))

    def save_attributes(self, request_envelope: RequestEnvelope, attributes: dict[str, Any]) -> None:
        self.records[request_envelope.session.user.user_id] = dict(attributes)
        self.save_count += 1

    def delete_attributes(self, request_envelope: RequestEnvelope) -> None:
        self.records.pop(request_envelope.session.user.user_id, None)


@dataclass
class FakeUpsService:
    time_zone: str | None = "America/New_York"
    error: Exception | None = None
    requested_devices: list[str] = field(default_factory=list)

    def get_system_time_zone(self, device_id: str, **kwargs: Any) -> str | None:
        self.requested_devices.append(device_id)
        if self.error is not None:
            raise self.error
        return self.time_zone


@dataclass
class FakeServiceClientFactory:
    ups: FakeUpsService

    def get_ups_service(self) -> FakeUpsService:
        return self.ups


def build_envelope(
    request: Any,
    *,
    session_attributes: dict[str, Any] | None = None,
    device_id: str | None = DEVICE_ID,
) -> RequestEnvelope:
    application = Application(application_id=APPLICATION_ID)
    user = User(user_id=USER_ID)
    device = Device(device_id=device_id)
    return RequestEnvelope(
        version="1.0",
        session=Session(
            new=True,
            session_id="amzn1.echo-api.session.test",
            user=user,
            attributes=dict(session_attributes or {}),
            application=application,
        ),
        context=Context(
            system=SystemState(
                application=application,
                user=user,
                device=device,
                api_endpoint="https://api.amazonalexa.com",
                api_access_token="test-token",
            )
        ),
        request=request,
    )


@pytest.fixture
def persistence() -> InMemoryPersistenceAdapter:
    return InMemoryPersistenceAdapter()


@pytest.fixture
def ups_service() -> FakeUpsService:
    return FakeUpsService()


@pytest.fixture
def launch_request() -> LaunchRequest:
    return LaunchRequest(request_id="req-launch", timestamp=REQUEST_TIME, locale="en-US")


@pytest.fixture
def session_ended_request() -> SessionEndedRequest:
    return SessionEndedRequest(
        request_id="req-ended",
        timestamp=REQUEST_TIME,
        locale="en-US",
        reason=SessionEndedReason.USER_INITIATED,
    )


@pytest.fixture
def make_intent_request():
    def _make(name: str, **slot_values: str | None) -> IntentRequest:
        slots = {slot_name: Slot(name=slot_name, value=value) for slot_name, value in slot_values.items()}
        return IntentRequest(
            request_id=f"req-{name}",
            timestamp=REQUEST_TIME,
            locale="en-US",
            intent=Intent(name=name, slots=slots),
        )

    return _make


@pytest.fixture
def make_handler_input(persistence: InMemoryPersistenceAdapter, ups_service: FakeUpsService):
    def _make(
        request: Any,
        *,
        session_attributes: dict[str, Any] | None = None,
        device_id: str | None = DEVICE_ID,
        with_services: bool = True,
    ) -> HandlerInput:
        envelope = build_envelope(request, session_attributes=session_attributes, device_id=device_id)
        return HandlerInput(
            request_envelope=envelope,
            attributes_manager=AttributesManager(request_envelope=envelope, persistence_adapter=persistence),
            service_client_factory=FakeServiceClientFactory(ups=ups_service) if with_services else None,
        )

    return _make
