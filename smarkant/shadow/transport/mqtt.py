"""MQTT transport for AWS IoT style device shadows."""

from __future__ import annotations

import asyncio
import contextlib
import ssl
from typing import Any

from loguru import logger

from smarkant.config.schema import ShadowConfig
from smarkant.shadow.transport.base import ShadowTransport, ShadowTransportError


def _reason_code_int(rc: Any) -> int:
    value = getattr(rc, "value", rc)
    try:
        return int(value) if value is not None else -1
    except (TypeError, ValueError):
        return -1


class MQTTShadowTransport(ShadowTransport):
    """Publishes shadow updates over one long-lived MQTT connection.

    An update completes when the broker acknowledges the publish (PUBACK for
    QoS 1). Acknowledgments still pending when the connection drops fail with
    ShadowTransportError.
    """

    name = "mqtt"

    def __init__(self, config: ShadowConfig) -> None:
        self.config = config
        self._running = False
        self._connected = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._mqtt_client: Any | None = None
        self._connected_event: asyncio.Event | None = None
        self._pending_acks: dict[int, asyncio.Future[None]] = {}

    @property
    def connected(self) -> bool:
        return self._connected

    async def start(self) -> None:
        if self._running:
            return
        host = self.config.resolve_host()
        self._loop = asyncio.get_running_loop()
        self._connected_event = asyncio.Event()
        self._setup_client()
        if self._mqtt_client is None:
            raise RuntimeError("MQTT client is not available")
        try:
            self._mqtt_client.connect_async(
                host=host,
                port=self.config.port,
                keepalive=max(10, self.config.keepalive_seconds),
            )
            self._mqtt_client.loop_start()
        except Exception:
            self._mqtt_client = None
            raise
        # set only once the network loop runs
        self._running = True
        try:
            await asyncio.wait_for(
                self._connected_event.wait(),
                timeout=max(0.1, self.config.connect_timeout_seconds),
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Shadow MQTT connection to {host}:{self.config.port} not established after "
                f"{self.config.connect_timeout_seconds}s, continuing in background"
            )

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._mqtt_client is not None:
            with contextlib.suppress(Exception):
                self._mqtt_client.disconnect()
            with contextlib.suppress(Exception):
                self._mqtt_client.loop_stop()
            self._mqtt_client = None
        self._connected = False
        self._fail_pending_acks("transport stopped")

    async def update_thing_shadow(self, thing_name: str, payload: str) -> None:
        if self._mqtt_client is None:
            raise ShadowTransportError("MQTT client is not initialized")
        if not self._connected:
            raise ShadowTransportError("MQTT client is not connected")

        topic = self.config.update_topic(thing_name)
        qos = max(0, min(2, self.config.qos))
        info = self._mqtt_client.publish(topic, payload=payload, qos=qos)
        if info.rc != 0:
            raise ShadowTransportError(f"MQTT publish failed rc={info.rc} topic={topic}")
        if qos == 0:
            return

        # Ack callbacks are marshalled onto this loop, so registering the
        # future before the next await cannot miss them.
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._pending_acks[int(info.mid)] = future
        try:
            await future
        finally:
            self._pending_acks.pop(int(info.mid), None)

    def _setup_client(self) -> None:
        try:
            import paho.mqtt.client as mqtt
        except ImportError as e:
            raise RuntimeError(
                f"paho-mqtt is required for {self.__class__.__name__}. Install with `pip install paho-mqtt`."
            ) from e

        client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=self.config.client_id,
            clean_session=True,
        )
        if self.config.username:
            client.username_pw_set(
                username=self.config.username,
                password=self.config.password or None,
            )
        if self.config.tls_enabled:
            client.tls_set(
                ca_certs=self.config.ca_cert_path or None,
                certfile=self.config.cert_path or None,
                keyfile=self.config.key_path or None,
                cert_reqs=ssl.CERT_REQUIRED,
                tls_version=ssl.PROTOCOL_TLS_CLIENT,
            )

        client.reconnect_delay_set(
            min_delay=max(1, self.config.reconnect_min_seconds),
            max_delay=max(self.config.reconnect_min_seconds, self.config.reconnect_max_seconds),
        )
        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect
        client.on_publish = self._on_publish
        self._mqtt_client = client

    def _on_connect(
        self,
        client: Any,
        userdata: Any,
        flags: Any,
        rc: Any,
        properties: Any | None = None,
    ) -> None:
        del client, userdata, flags, properties
        rc_int = _reason_code_int(rc)
        self._connected = rc_int == 0
        if rc_int != 0:
            logger.warning(f"Shadow MQTT connect failed rc={rc_int}")
            return
        logger.info(f"Shadow MQTT connected to {self.config.resolve_host()}:{self.config.port}")
        if self._loop and self._connected_event:
            self._loop.call_soon_threadsafe(self._connected_event.set)

    def _on_disconnect(
        self,
        client: Any,
        userdata: Any,
        *args: Any,
    ) -> None:
        del client, userdata
        # paho v1: (rc), paho v2: (disconnect_flags, reason_code, properties)
        rc = args[0] if len(args) == 1 else (args[1] if len(args) >= 2 else None)
        rc_int = _reason_code_int(rc)
        self._connected = False
        if self._running:
            logger.warning(f"Shadow MQTT disconnected rc={rc_int}")
        if self._loop and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._fail_pending_acks, f"disconnected rc={rc_int}")

    def _on_publish(self, client: Any, userdata: Any, mid: Any, *args: Any) -> None:
        del client, userdata, args
        if self._loop:
            self._loop.call_soon_threadsafe(self._resolve_ack, int(mid))

    def _resolve_ack(self, mid: int) -> None:
        future = self._pending_acks.get(mid)
        if future is not None and not future.done():
            future.set_result(None)

    def _fail_pending_acks(self, reason: str) -> None:
        for future in list(self._pending_acks.values()):
            if not future.done():
                future.set_exception(ShadowTransportError(f"shadow update not acknowledged: {reason}"))
