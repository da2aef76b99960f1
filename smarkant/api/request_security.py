"""Request freshness checks for the skill webhook."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_timestamp_ms(value: str | int | None) -> int | None:
    """Parse an ISO 8601 timestamp or epoch seconds/milliseconds."""
    text = str(value if value is not None else "").strip()
    if not text:
        return None
    try:
        parsed = int(text)
    except (TypeError, ValueError):
        pass
    else:
        # Allow seconds input as well.
        if 0 < parsed < 10_000_000_000:
            parsed *= 1000
        return parsed
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


@dataclass(slots=True)
class RequestFreshnessCheck:
    """Rejects requests whose timestamp is too far from the local clock."""

    tolerance_seconds: int = 150
    _now_fn: Callable[[], int] = now_ms

    def __post_init__(self) -> None:
        self.tolerance_seconds = max(1, int(self.tolerance_seconds))

    def validate(self, timestamp: str | int | None) -> tuple[bool, str]:
        ts = parse_timestamp_ms(timestamp)
        if ts is None:
            return False, "missing_timestamp"
        if abs(int(self._now_fn()) - ts) > self.tolerance_seconds * 1000:
            return False, "stale_timestamp"
        return True, "ok"
