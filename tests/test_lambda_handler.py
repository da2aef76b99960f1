import pytest

from smarkant.api import lambda_handler
from smarkant.config.schema import Config, ShadowConfig, SkillConfig
from smarkant.skill.errors import InvalidApplicationError


@pytest.fixture
def mock_runtime_config(monkeypatch):
    cfg = Config(
        skill=SkillConfig(application_id="amzn1.ask.skill.smarkant"),
        shadow=ShadowConfig(transport="mock", thing_name="lambda-desk"),
    )
    monkeypatch.setattr(lambda_handler, "load_config", lambda: cfg)
    lambda_handler.reset()
    yield cfg
    lambda_handler.reset()


def test_handler_reuses_runtime_between_invocations(mock_runtime_config, intent_event) -> None:
    first = lambda_handler.handler(intent_event("MoveUpIntent"), None)
    second = lambda_handler.handler(intent_event("MoveDownIntent", locale="de-DE"), None)

    assert first["response"]["outputSpeech"]["text"] == "Smarkant moves up!"
    assert second["response"]["outputSpeech"]["text"] == "Smarkant fährt runter!"
    transport = lambda_handler._runtime.transport
    assert [update.thing_name for update in transport.updates] == ["lambda-desk", "lambda-desk"]
    assert [update.document for update in transport.updates] == [
        {"state": {"desired": {"move": "position", "position": 2}}},
        {"state": {"desired": {"move": "position", "position": 1}}},
    ]


def test_handler_propagates_request_errors(mock_runtime_config, intent_event) -> None:
    with pytest.raises(InvalidApplicationError):
        lambda_handler.handler(intent_event("StopIntent", application_id="amzn1.ask.skill.other"), None)

    assert lambda_handler._runtime.transport.updates == []
