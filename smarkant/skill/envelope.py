"""Voice platform request/response envelopes (Alexa skill JSON format)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from smarkant.skill.errors import MalformedRequestError

RESPONSE_VERSION = "1.0"

INTENT_REQUEST = "IntentRequest"
LAUNCH_REQUEST = "LaunchRequest"
SESSION_ENDED_REQUEST = "SessionEndedRequest"


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


@dataclass(slots=True)
class SkillRequest:
    """The parts of an inbound skill request the desk handler uses."""

    request_type: str
    request_id: str
    timestamp: str
    locale: str
    application_id: str = ""
    intent_name: str = ""
    slots: dict[str, str | None] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "SkillRequest":
        """Create a request from the raw envelope dict."""
        if not isinstance(data, dict):
            raise MalformedRequestError("request envelope must be an object")
        request = data.get("request")
        if not isinstance(request, dict):
            raise MalformedRequestError("request envelope has no request object")
        request_type = str(request.get("type") or "").strip()
        if not request_type:
            raise MalformedRequestError("request.type is required")

        system = _as_dict(_as_dict(data.get("context")).get("System"))
        application = _as_dict(system.get("application")) or _as_dict(
            _as_dict(data.get("session")).get("application")
        )

        intent_name = ""
        slots: dict[str, str | None] = {}
        if request_type == INTENT_REQUEST:
            intent = request.get("intent")
            if not isinstance(intent, dict) or not str(intent.get("name") or "").strip():
                raise MalformedRequestError("request.intent.name is required for intent requests")
            intent_name = str(intent["name"]).strip()
            for key, slot in _as_dict(intent.get("slots")).items():
                slot_data = _as_dict(slot)
                name = str(slot_data.get("name") or key)
                value = slot_data.get("value")
                slots[name] = None if value is None else str(value)

        return cls(
            request_type=request_type,
            request_id=str(request.get("requestId") or ""),
            timestamp=str(request.get("timestamp") or ""),
            locale=str(request.get("locale") or "").strip(),
            application_id=str(application.get("applicationId") or "").strip(),
            intent_name=intent_name,
            slots=slots,
        )


def build_speech_response(text: str, *, end_session: bool = True) -> dict[str, Any]:
    """Build a response envelope that speaks ``text``."""
    return {
        "version": RESPONSE_VERSION,
        "response": {
            "outputSpeech": {"type": "PlainText", "text": text},
            "shouldEndSession": end_session,
        },
    }


def build_empty_response() -> dict[str, Any]:
    """Response for requests that must not speak (session end notifications)."""
    return {"version": RESPONSE_VERSION, "response": {}}
