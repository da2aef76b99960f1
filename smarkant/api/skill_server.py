"""Threaded HTTP webhook that serves voice skill requests."""

from __future__ import annotations

import asyncio
import contextlib
import json
import threading
from concurrent.futures import TimeoutError as FutureTimeoutError
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import urlparse

from loguru import logger

from smarkant.api.request_security import RequestFreshnessCheck
from smarkant.shadow import ShadowTransport
from smarkant.skill.errors import SkillRequestError
from smarkant.skill.handler import SkillHandler


def json_response(data: dict[str, Any]) -> bytes:
    """Serialize JSON response payload."""
    return json.dumps(data, ensure_ascii=False).encode("utf-8")


def _error_to_status(error: SkillRequestError) -> HTTPStatus:
    if error.status == "forbidden":
        return HTTPStatus.FORBIDDEN
    return HTTPStatus.BAD_REQUEST


class _SkillRequestHandler(BaseHTTPRequestHandler):
    """Synchronous HTTP handler that proxies into the asyncio skill handler."""

    skill: SkillHandler | None = None
    transport: ShadowTransport | None = None
    loop: asyncio.AbstractEventLoop | None = None
    skill_path: str = "/alexa"
    max_request_body_bytes: int = 256 * 1024
    request_timeout_seconds: float = 8.0
    freshness_check: RequestFreshnessCheck | None = None

    server_version = "smarkant-skill/0.1"

    def do_GET(self) -> None:  # noqa: N802
        parsed = urlparse(self.path)
        if parsed.path == "/healthz":
            transport = self.transport
            self._send_json(
                HTTPStatus.OK,
                {
                    "success": True,
                    "transport": transport.name if transport else "",
                    "connected": bool(transport and transport.connected),
                },
            )
            return
        self._send_json(HTTPStatus.NOT_FOUND, {"success": False, "error": "unknown endpoint"})

    def do_POST(self) -> None:  # noqa: N802
        parsed = urlparse(self.path)
        if parsed.path.rstrip("/") != self.skill_path.rstrip("/"):
            self._send_json(HTTPStatus.NOT_FOUND, {"success": False, "error": "unknown endpoint"})
            return
        payload = self._read_json_body()
        if payload is None:
            return
        if not self._ensure_fresh(payload):
            return
        if self.skill is None or self.loop is None:
            self._send_json(HTTPStatus.SERVICE_UNAVAILABLE, {"success": False, "error": "skill not ready"})
            return

        future = asyncio.run_coroutine_threadsafe(self.skill.handle(payload), self.loop)
        ok, result, status, error = self._resolve_future_result(
            future,
            timeout=self.request_timeout_seconds,
        )
        if not ok:
            self._send_json(status, {"success": False, "error": error})
            return
        self._send_json(HTTPStatus.OK, result)

    def log_message(self, fmt: str, *args: Any) -> None:
        logger.debug("skill-api " + fmt % args)

    def _ensure_fresh(self, payload: Any) -> bool:
        if self.freshness_check is None:
            return True
        request = payload.get("request") if isinstance(payload, dict) else None
        timestamp = request.get("timestamp") if isinstance(request, dict) else None
        ok, reason = self.freshness_check.validate(timestamp)
        if ok:
            return True
        logger.warning(f"Rejected skill request: {reason}")
        self._send_json(HTTPStatus.BAD_REQUEST, {"success": False, "error": reason})
        return False

    def _read_json_body(self) -> Any | None:
        try:
            length = int(self.headers.get("Content-Length", "0"))
        except ValueError:
            length = 0
        max_body = max(1024, int(self.max_request_body_bytes))
        if length > max_body:
            self._send_json(
                HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
                {
                    "success": False,
                    "error": f"request body too large (max {max_body} bytes)",
                },
            )
            return None
        body = self.rfile.read(length) if length > 0 else b"{}"
        try:
            return json.loads(body.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            self._send_json(HTTPStatus.BAD_REQUEST, {"success": False, "error": "invalid json"})
            return None

    @staticmethod
    def _resolve_future_result(
        future: Any,
        *,
        timeout: float,
    ) -> tuple[bool, Any | None, HTTPStatus, str | None]:
        """Resolve a thread-safe asyncio future into (ok, result, http_status, error)."""
        try:
            return True, future.result(timeout=timeout), HTTPStatus.OK, None
        except FutureTimeoutError:
            with contextlib.suppress(Exception):
                future.cancel()
            return False, None, HTTPStatus.GATEWAY_TIMEOUT, "skill timeout"
        except SkillRequestError as e:
            logger.warning(f"Rejected skill request: {e}")
            return False, None, _error_to_status(e), str(e)
        except Exception as e:
            logger.exception(f"skill-api request failed: {e}")
            return False, None, HTTPStatus.INTERNAL_SERVER_ERROR, "skill error"

    def _send_json(self, code: HTTPStatus, payload: dict[str, Any]) -> None:
        body = json_response(payload)
        self.send_response(code)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)


class SkillWebhookServer:
    """Threaded HTTP endpoint in front of a skill handler running on ``loop``."""

    def __init__(
        self,
        *,
        host: str,
        port: int,
        skill: SkillHandler,
        loop: asyncio.AbstractEventLoop,
        transport: ShadowTransport | None = None,
        path: str = "/alexa",
        max_request_body_bytes: int = 256 * 1024,
        request_timeout_seconds: float = 8.0,
        verify_timestamp: bool = True,
        timestamp_tolerance_seconds: int = 150,
    ) -> None:
        self.host = host
        self.port = port
        self.skill = skill
        self.loop = loop
        self.transport = transport
        self.path = "/" + str(path or "/alexa").strip("/")
        self.max_request_body_bytes = max(1024, int(max_request_body_bytes))
        self.request_timeout_seconds = max(0.5, float(request_timeout_seconds))
        self.verify_timestamp = bool(verify_timestamp)
        self.timestamp_tolerance_seconds = max(1, int(timestamp_tolerance_seconds))
        self._thread: threading.Thread | None = None
        self._server: ThreadingHTTPServer | None = None

    def start(self) -> None:
        handler_cls = type("BoundSkillRequestHandler", (_SkillRequestHandler,), {})
        handler_cls.skill = self.skill
        handler_cls.transport = self.transport
        handler_cls.loop = self.loop
        handler_cls.skill_path = self.path
        handler_cls.max_request_body_bytes = self.max_request_body_bytes
        handler_cls.request_timeout_seconds = self.request_timeout_seconds
        handler_cls.freshness_check = (
            RequestFreshnessCheck(tolerance_seconds=self.timestamp_tolerance_seconds)
            if self.verify_timestamp
            else None
        )
        self._server = ThreadingHTTPServer((self.host, self.port), handler_cls)
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.info(f"Skill webhook listening on http://{self.host}:{self.port}{self.path}")

    def stop(self) -> None:
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2)
        self._thread = None
