"""Serverless entry point: ``smarkant.api.lambda_handler.handler``."""

from __future__ import annotations

import asyncio
import threading
from typing import Any

from smarkant.config.loader import load_config
from smarkant.skill.runtime import SkillRuntime

_lock = threading.Lock()
_loop: asyncio.AbstractEventLoop | None = None
_runtime: SkillRuntime | None = None


def _get_runtime() -> tuple[asyncio.AbstractEventLoop, SkillRuntime]:
    # The transport is bound to the loop it was started on, so both live
    # for the whole process and are reused by warm invocations.
    global _loop, _runtime
    with _lock:
        if _loop is None or _loop.is_closed():
            _loop = asyncio.new_event_loop()
        if _runtime is None:
            _runtime = SkillRuntime(load_config())
        if not _runtime.started:
            _loop.run_until_complete(_runtime.start())
        return _loop, _runtime


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Handle one skill request. Request errors propagate to the host."""
    del context
    loop, runtime = _get_runtime()
    return loop.run_until_complete(runtime.handler.handle(event))


def reset() -> None:
    """Stop the cached runtime and close its loop."""
    global _loop, _runtime
    with _lock:
        if _loop is not None and not _loop.is_closed():
            if _runtime is not None:
                _loop.run_until_complete(_runtime.stop())
            _loop.close()
        _loop = None
        _runtime = None
