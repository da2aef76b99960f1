"""Transports that deliver shadow update documents."""

from smarkant.shadow.transport.base import ShadowTransport, ShadowTransportError
from smarkant.shadow.transport.mock import MockShadowTransport, RecordedUpdate
from smarkant.shadow.transport.mqtt import MQTTShadowTransport

__all__ = [
    "ShadowTransport",
    "ShadowTransportError",
    "MockShadowTransport",
    "RecordedUpdate",
    "MQTTShadowTransport",
]
