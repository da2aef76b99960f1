"""Transport contract for device shadow updates."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ShadowTransportError(RuntimeError):
    """A shadow update could not be delivered."""


class ShadowTransport(ABC):
    """Abstract transport used by the shadow publisher."""

    name: str = "base"

    async def start(self) -> None:
        """Open transport resources."""

    async def stop(self) -> None:
        """Release transport resources."""

    @property
    def connected(self) -> bool:
        return True

    @abstractmethod
    async def update_thing_shadow(self, thing_name: str, payload: str) -> None:
        """Submit ``payload`` and return once the service acknowledged it."""
