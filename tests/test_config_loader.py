import json

from smarkant.config.loader import (
    camel_to_snake,
    convert_keys,
    convert_to_camel,
    load_config,
    save_config,
    snake_to_camel,
)
from smarkant.config.schema import Config, ShadowConfig


def test_key_case_conversion() -> None:
    assert camel_to_snake("thingName") == "thing_name"
    assert camel_to_snake("ackTimeoutSeconds") == "ack_timeout_seconds"
    assert snake_to_camel("ca_cert_path") == "caCertPath"
    assert convert_keys({"shadow": {"thingName": "desk"}}) == {"shadow": {"thing_name": "desk"}}
    assert convert_to_camel({"skill": {"fallback_locale": "en-US"}}) == {"skill": {"fallbackLocale": "en-US"}}


def test_load_config_reads_camel_case_file(tmp_path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps(
            {
                "skill": {"applicationId": "amzn1.ask.skill.smarkant", "fallbackLocale": "en-US"},
                "shadow": {"transport": "mock", "thingName": "office-desk", "ackTimeoutSeconds": 2},
                "server": {"port": 19000},
            }
        ),
        encoding="utf-8",
    )

    cfg = load_config(config_path)

    assert cfg.skill.application_id == "amzn1.ask.skill.smarkant"
    assert cfg.skill.fallback_locale == "en-US"
    assert cfg.shadow.transport == "mock"
    assert cfg.shadow.thing_name == "office-desk"
    assert cfg.shadow.ack_timeout_seconds == 2.0
    assert cfg.server.port == 19000
    assert cfg.server.path == "/alexa"


def test_load_config_falls_back_to_defaults_for_invalid_file(tmp_path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{not json", encoding="utf-8")

    cfg = load_config(config_path)

    assert cfg.shadow.thing_name == "smarkant"
    assert cfg.shadow.update_topic() == "$aws/things/smarkant/shadow/update"


def test_save_config_round_trips(tmp_path) -> None:
    config_path = tmp_path / "nested" / "config.json"
    cfg = Config(shadow=ShadowConfig(thing_name="lab-desk", endpoint="abc123", region="eu-west-1"))

    save_config(cfg, config_path)
    raw = json.loads(config_path.read_text(encoding="utf-8"))
    loaded = load_config(config_path)

    assert raw["shadow"]["thingName"] == "lab-desk"
    assert raw["shadow"]["updateTopicTemplate"] == "$aws/things/{thing_name}/shadow/update"
    assert loaded.shadow.thing_name == "lab-desk"
    assert loaded.shadow.resolve_host() == "abc123-ats.iot.eu-west-1.amazonaws.com"


def test_config_reads_nested_environment(monkeypatch) -> None:
    monkeypatch.setenv("SMARKANT_SHADOW__THING_NAME", "env-desk")
    monkeypatch.setenv("SMARKANT_SKILL__VERIFY_TIMESTAMP", "false")

    cfg = Config()

    assert cfg.shadow.thing_name == "env-desk"
    assert cfg.skill.verify_timestamp is False


def test_shadow_host_resolution() -> None:
    assert ShadowConfig(endpoint="iot.example.com").resolve_host() == "iot.example.com"
    assert ShadowConfig(endpoint="abc", region="us-east-1").resolve_host() == "abc-ats.iot.us-east-1.amazonaws.com"
    assert ShadowConfig(update_topic_template="desks/{thing_name}/update").update_topic("d1") == "desks/d1/update"

    try:
        ShadowConfig().resolve_host()
    except ValueError as e:
        assert "endpoint" in str(e)
    else:
        raise AssertionError("expected ValueError")
