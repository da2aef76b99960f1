"""Skill request handling: validation, shadow update and spoken reply."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger

from smarkant.shadow.publisher import ShadowPublisher, ShadowUpdateResult
from smarkant.skill.envelope import (
    INTENT_REQUEST,
    SESSION_ENDED_REQUEST,
    SkillRequest,
    build_empty_response,
    build_speech_response,
)
from smarkant.skill.errors import InvalidApplicationError, UnhandledRequestError
from smarkant.skill.intents import DesiredState, IntentName, ValidationFailure, interpret_intent
from smarkant.skill.messages import DEFAULT_CATALOG, Locale, MessageCatalog, MessageId, resolve_locale

CONFIRMATION_MESSAGES: dict[IntentName, MessageId] = {
    IntentName.STOP: MessageId.SMARKANT_STOPS,
    IntentName.MOVE_UP: MessageId.SMARKANT_MOVES_UP,
    IntentName.MOVE_DOWN: MessageId.SMARKANT_MOVES_DOWN,
    IntentName.MOVE_TO_POSITION: MessageId.SMARKANT_MOVES_TO_POSITION,
    IntentName.MOVE_TO_HEIGHT: MessageId.SMARKANT_MOVES_TO_HEIGHT,
}


@dataclass(frozen=True, slots=True)
class SkillReply:
    """Spoken reply and the command or failure that produced it."""

    text: str
    locale: Locale
    intent: IntentName
    state: DesiredState | None = None
    failure: ValidationFailure | None = None
    shadow: ShadowUpdateResult | None = None


class SkillHandler:
    """Answers voice requests for one desk."""

    def __init__(
        self,
        publisher: ShadowPublisher,
        *,
        catalog: MessageCatalog = DEFAULT_CATALOG,
        application_id: str = "",
        fallback_locale: str = "",
    ) -> None:
        self.publisher = publisher
        self.catalog = catalog
        self.application_id = str(application_id or "").strip()
        self.fallback_locale = str(fallback_locale or "").strip()

    async def handle(self, event: Any) -> dict[str, Any]:
        """Handle a raw request envelope and return the response envelope."""
        request = SkillRequest.from_dict(event)
        self.verify_application(request.application_id)

        if request.request_type == SESSION_ENDED_REQUEST:
            return build_empty_response()
        if request.request_type != INTENT_REQUEST:
            raise UnhandledRequestError(f"unhandled request type: {request.request_type}")

        reply = await self.handle_intent(request.locale, request.intent_name, request.slots)
        return build_speech_response(reply.text)

    def verify_application(self, application_id: str) -> None:
        if not self.application_id:
            return
        if application_id != self.application_id:
            logger.warning(f"Rejected request for application {application_id or '<none>'}")
            raise InvalidApplicationError("request application id does not match this skill")

    async def handle_intent(
        self,
        locale: str,
        intent: IntentName | str,
        slots: Mapping[str, str | None] | None = None,
    ) -> SkillReply:
        """Validate an intent, publish its desired state and render the reply."""
        resolved_locale = resolve_locale(locale, self.fallback_locale)
        name = intent if isinstance(intent, IntentName) else IntentName.parse(intent)

        outcome = interpret_intent(name, slots)
        if isinstance(outcome, ValidationFailure):
            logger.info(f"{name} rejected: {outcome.kind} value={outcome.value!r}")
            text = self.catalog.render(resolved_locale, outcome.message_id, outcome.message_params())
            return SkillReply(text=text, locale=resolved_locale, intent=name, failure=outcome)

        shadow = await self.publisher.publish(outcome)
        text = self.catalog.render(
            resolved_locale,
            CONFIRMATION_MESSAGES[name],
            outcome.message_params(),
        )
        return SkillReply(text=text, locale=resolved_locale, intent=name, state=outcome, shadow=shadow)
