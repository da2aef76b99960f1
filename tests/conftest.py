from typing import Any

import pytest


def make_intent_event(
    intent: str,
    *,
    locale: str = "en-US",
    slots: dict[str, str | None] | None = None,
    application_id: str = "amzn1.ask.skill.smarkant",
    timestamp: str = "2017-10-01T12:00:00Z",
) -> dict[str, Any]:
    return {
        "version": "1.0",
        "session": {
            "new": True,
            "sessionId": "amzn1.echo-api.session.1",
            "application": {"applicationId": application_id},
        },
        "context": {"System": {"application": {"applicationId": application_id}}},
        "request": {
            "type": "IntentRequest",
            "requestId": "amzn1.echo-api.request.1",
            "timestamp": timestamp,
            "locale": locale,
            "intent": {
                "name": intent,
                "slots": {
                    name: {"name": name, "value": value} for name, value in (slots or {}).items()
                },
            },
        },
    }


@pytest.fixture
def intent_event():
    return make_intent_event
