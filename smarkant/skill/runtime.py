"""Process-wide wiring of transport, publisher and handler."""

from __future__ import annotations

from loguru import logger

from smarkant.config.schema import Config
from smarkant.shadow import ShadowPublisher, ShadowTransport, create_transport_from_config
from smarkant.skill.handler import SkillHandler
from smarkant.skill.messages import resolve_locale


class SkillRuntime:
    """Owns the long-lived shadow transport and the handler built on it."""

    def __init__(self, config: Config, *, transport: ShadowTransport | None = None) -> None:
        self.config = config
        if config.skill.fallback_locale:
            resolve_locale(config.skill.fallback_locale)
        self.transport = transport or create_transport_from_config(config.shadow)
        self.publisher = ShadowPublisher(
            self.transport,
            thing_name=config.shadow.thing_name,
            ack_timeout_seconds=config.shadow.ack_timeout_seconds,
        )
        self.handler = SkillHandler(
            self.publisher,
            application_id=config.skill.application_id,
            fallback_locale=config.skill.fallback_locale,
        )
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        if self._started:
            return
        await self.transport.start()
        self._started = True
        logger.info(
            f"Smarkant skill ready: transport={self.transport.name} thing={self.publisher.thing_name}"
        )

    async def stop(self) -> None:
        if not self._started:
            return
        self._started = False
        await self.transport.stop()
