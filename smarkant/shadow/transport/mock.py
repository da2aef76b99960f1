"""In-memory transport used for dry runs and tests."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any

from smarkant.shadow.transport.base import ShadowTransport


@dataclass(frozen=True, slots=True)
class RecordedUpdate:
    thing_name: str
    payload: str

    @property
    def document(self) -> dict[str, Any]:
        return json.loads(self.payload)


class MockShadowTransport(ShadowTransport):
    """Queue-backed transport that records the most recent updates it receives."""

    name = "mock"

    def __init__(
        self,
        *,
        fail_with: Exception | None = None,
        delay_s: float = 0.0,
        max_records: int = 256,
    ) -> None:
        self.fail_with = fail_with
        self.delay_s = delay_s
        self.max_records = max(1, int(max_records))
        self.updates: list[RecordedUpdate] = []
        self._queue: asyncio.Queue[RecordedUpdate] = asyncio.Queue(maxsize=self.max_records)
        self._running = False

    async def start(self) -> None:
        self._running = True

    async def stop(self) -> None:
        self._running = False

    @property
    def connected(self) -> bool:
        return self._running

    async def update_thing_shadow(self, thing_name: str, payload: str) -> None:
        update = RecordedUpdate(thing_name=thing_name, payload=payload)
        self.updates.append(update)
        if len(self.updates) > self.max_records:
            del self.updates[: len(self.updates) - self.max_records]
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(update)
        if self.delay_s > 0:
            await asyncio.sleep(self.delay_s)
        if self.fail_with is not None:
            raise self.fail_with

    async def next_update(self, timeout_s: float = 1.0) -> RecordedUpdate:
        """Await the next update submitted by the publisher."""
        return await asyncio.wait_for(self._queue.get(), timeout=timeout_s)
