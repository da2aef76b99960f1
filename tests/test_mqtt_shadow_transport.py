import asyncio
import json

import pytest

from smarkant.config.schema import ShadowConfig
from smarkant.shadow.transport.base import ShadowTransportError
from smarkant.shadow.transport.mqtt import MQTTShadowTransport


class _FakePublishInfo:
    def __init__(self, rc: int, mid: int) -> None:
        self.rc = rc
        self.mid = mid


class _FakeMQTTClient:
    def __init__(self, rc: int = 0) -> None:
        self.rc = rc
        self.published: list[tuple[str, str, int]] = []
        self._next_mid = 0

    def publish(self, topic: str, payload, qos: int):  # type: ignore[no-untyped-def]
        self._next_mid += 1
        self.published.append((topic, payload, qos))
        return _FakePublishInfo(self.rc, self._next_mid)


def _make_transport(**kwargs) -> tuple[MQTTShadowTransport, _FakeMQTTClient]:
    transport = MQTTShadowTransport(ShadowConfig(endpoint="broker.example.com", **kwargs))
    fake = _FakeMQTTClient()
    transport._mqtt_client = fake
    transport._connected = True
    transport._loop = asyncio.get_running_loop()
    return transport, fake


def test_resolve_host_expands_endpoint_prefix_with_region() -> None:
    assert ShadowConfig(endpoint="a1b2c3", region="eu-west-1").resolve_host() == (
        "a1b2c3-ats.iot.eu-west-1.amazonaws.com"
    )
    assert ShadowConfig(endpoint="mqtt.local", region="eu-west-1").resolve_host() == "mqtt.local"
    with pytest.raises(ValueError):
        ShadowConfig(endpoint="").resolve_host()


def test_update_topic_uses_thing_name() -> None:
    assert ShadowConfig(thing_name="desk").update_topic() == "$aws/things/desk/shadow/update"
    assert ShadowConfig().update_topic("other") == "$aws/things/other/shadow/update"


@pytest.mark.asyncio
async def test_update_waits_for_publish_ack() -> None:
    transport, fake = _make_transport()
    payload = json.dumps({"state": {"desired": {"move": "stop"}}})

    task = asyncio.create_task(transport.update_thing_shadow("desk-1", payload))
    await asyncio.sleep(0)
    assert not task.done()
    assert fake.published == [("$aws/things/desk-1/shadow/update", payload, 1)]

    transport._on_publish(None, None, 1, None, None)
    await asyncio.wait_for(task, timeout=1.0)
    assert transport._pending_acks == {}


@pytest.mark.asyncio
async def test_update_with_qos0_does_not_wait() -> None:
    transport, fake = _make_transport(qos=0)
    await asyncio.wait_for(transport.update_thing_shadow("desk-1", "{}"), timeout=1.0)
    assert fake.published[0][2] == 0


@pytest.mark.asyncio
async def test_update_fails_when_disconnected() -> None:
    transport, fake = _make_transport()
    transport._connected = False
    with pytest.raises(ShadowTransportError):
        await transport.update_thing_shadow("desk-1", "{}")
    assert fake.published == []


@pytest.mark.asyncio
async def test_update_fails_on_publish_error() -> None:
    transport, fake = _make_transport()
    fake.rc = 4
    with pytest.raises(ShadowTransportError):
        await transport.update_thing_shadow("desk-1", "{}")


@pytest.mark.asyncio
async def test_disconnect_fails_pending_acks() -> None:
    transport, _ = _make_transport()
    transport._running = True

    task = asyncio.create_task(transport.update_thing_shadow("desk-1", "{}"))
    await asyncio.sleep(0)
    transport._on_disconnect(None, None, None, 7, None)
    with pytest.raises(ShadowTransportError):
        await asyncio.wait_for(task, timeout=1.0)
    assert transport.connected is False


@pytest.mark.asyncio
async def test_on_connect_sets_connected_state() -> None:
    transport, _ = _make_transport()
    transport._connected = False
    transport._connected_event = asyncio.Event()

    transport._on_connect(None, None, {}, 0, None)
    await asyncio.wait_for(transport._connected_event.wait(), timeout=1.0)
    assert transport.connected is True

    transport._on_connect(None, None, {}, 5, None)
    assert transport.connected is False


@pytest.mark.asyncio
async def test_start_can_be_retried_after_config_failure() -> None:
    transport = MQTTShadowTransport(ShadowConfig(endpoint=""))

    with pytest.raises(ValueError):
        await transport.start()
    with pytest.raises(ValueError):
        await transport.start()

    assert transport._mqtt_client is None
    with pytest.raises(ShadowTransportError, match="not initialized"):
        await transport.update_thing_shadow("smarkant", "{}")


@pytest.mark.asyncio
async def test_start_can_be_retried_after_client_setup_failure(monkeypatch) -> None:
    transport = MQTTShadowTransport(ShadowConfig(endpoint="broker.example.com"))
    calls: list[int] = []

    def _broken_setup() -> None:
        calls.append(1)
        raise RuntimeError("paho-mqtt is required")

    monkeypatch.setattr(transport, "_setup_client", _broken_setup)

    with pytest.raises(RuntimeError):
        await transport.start()
    with pytest.raises(RuntimeError):
        await transport.start()

    assert len(calls) == 2
