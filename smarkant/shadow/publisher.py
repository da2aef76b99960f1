"""Publishes desired desk states to the device shadow."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from loguru import logger

from smarkant.shadow.document import build_update_document, serialize_update_document
from smarkant.shadow.transport.base import ShadowTransport
from smarkant.skill.intents import DesiredState


@dataclass(frozen=True, slots=True)
class ShadowUpdateResult:
    """Outcome of one shadow update. The spoken reply never depends on it."""

    thing_name: str
    document: dict[str, Any]
    acknowledged: bool
    error: str | None = None


class ShadowPublisher:
    """Submits one desired-state document per command to a fixed thing."""

    def __init__(
        self,
        transport: ShadowTransport,
        *,
        thing_name: str,
        ack_timeout_seconds: float | None = 5.0,
    ) -> None:
        if not str(thing_name or "").strip():
            raise ValueError("thing_name is required")
        self.transport = transport
        self.thing_name = thing_name.strip()
        self.ack_timeout_seconds = (
            max(0.1, float(ack_timeout_seconds)) if ack_timeout_seconds else None
        )

    async def publish(self, state: DesiredState) -> ShadowUpdateResult:
        """Submit ``state`` and wait until the transport is done with it.

        Transport errors and acknowledgment timeouts are logged and reported
        in the result; they are never raised.
        """
        document = build_update_document(state)
        payload = serialize_update_document(document)
        try:
            await asyncio.wait_for(
                self.transport.update_thing_shadow(self.thing_name, payload),
                timeout=self.ack_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Shadow update for {self.thing_name} not acknowledged within "
                f"{self.ack_timeout_seconds}s: {payload}"
            )
            return ShadowUpdateResult(self.thing_name, document, acknowledged=False, error="timeout")
        except Exception as e:
            logger.warning(f"Shadow update for {self.thing_name} via {self.transport.name} failed: {e}")
            return ShadowUpdateResult(self.thing_name, document, acknowledged=False, error=str(e))

        logger.info(f"Shadow update for {self.thing_name} accepted: {payload}")
        return ShadowUpdateResult(self.thing_name, document, acknowledged=True)
