"""Device shadow documents, transports and publisher."""

from smarkant.config.schema import ShadowConfig
from smarkant.shadow.document import build_update_document, serialize_update_document
from smarkant.shadow.publisher import ShadowPublisher, ShadowUpdateResult
from smarkant.shadow.transport import (
    MockShadowTransport,
    MQTTShadowTransport,
    ShadowTransport,
    ShadowTransportError,
)


def create_transport_from_config(config: ShadowConfig) -> ShadowTransport:
    """Factory helper to build the configured shadow transport."""
    transport_name = (config.transport or "mqtt").strip().lower()
    if transport_name == "mock":
        return MockShadowTransport()
    if transport_name == "mqtt":
        return MQTTShadowTransport(config)
    raise ValueError(f"unknown shadow transport: {config.transport!r}")


__all__ = [
    "build_update_document",
    "serialize_update_document",
    "ShadowPublisher",
    "ShadowUpdateResult",
    "ShadowTransport",
    "ShadowTransportError",
    "MockShadowTransport",
    "MQTTShadowTransport",
    "create_transport_from_config",
]
