"""
WebSocket JSON-RPC provider.

Send-style provider over a single WebSocket connection. Responses are
matched back to callbacks by JSON-RPC id, so concurrent requests sharing an
id can receive each other's responses. A request with no response within
``request_timeout`` seconds fails with TransportFailure.
"""

import asyncio
import functools
import json
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Optional, Set

import structlog
import websockets

from provider_adapter.config import AdapterConfig, get_config
from provider_adapter.providers.interface import SendCallback, TransportFailure

logger = structlog.get_logger(__name__)


@dataclass(eq=False)
class _PendingRequest:
    """A callback waiting for its response, with the timer that expires it."""

    callback: SendCallback
    timer: Optional[asyncio.TimerHandle] = None
    settled: bool = False

    def settle(self, error: Any, response: Optional[Dict[str, Any]]) -> None:
        """Invoke the callback once; later outcomes are dropped."""
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None
        if not self.settled:
            self.settled = True
            self.callback(error, response)


class WebSocketSendProvider:
    """
    WebSocket provider.

    Implements the send-style capability: ``send(payload, callback)``
    writes the envelope and the receive loop invokes the callback with
    ``(error, response)`` when the matching response arrives.
    """

    def __init__(self, config: Optional[AdapterConfig] = None, url: Optional[str] = None):
        """
        Initialize the WebSocket provider.

        Args:
            config: Adapter configuration. Uses global config if not provided.
            url: Endpoint override, defaults to ``config.ws_url``
        """
        self.config = config or get_config()
        self.url = url or self.config.ws_url
        self._ws: Optional[Any] = None
        self._pending: Dict[Any, Deque[_PendingRequest]] = defaultdict(deque)
        self._receive_task: Optional[asyncio.Task] = None
        self._send_tasks: Set[asyncio.Task] = set()
        self._connect_lock = asyncio.Lock()

    async def connect(self) -> None:
        """Establish the WebSocket connection."""
        async with self._connect_lock:
            if self._ws is not None:
                return

            try:
                self._ws = await asyncio.wait_for(
                    websockets.connect(self.url, ping_interval=30, ping_timeout=10),
                    timeout=self.config.request_timeout,
                )
            except (OSError, asyncio.TimeoutError, websockets.WebSocketException) as e:
                raise TransportFailure(f"Failed to connect to {self.url}: {e}") from e

            self._receive_task = asyncio.create_task(self._receive_loop())
            logger.info("ws_provider_connected", url=self.url)

    async def disconnect(self) -> None:
        """Close the connection and fail any requests still waiting."""
        send_tasks = list(self._send_tasks)
        for task in send_tasks:
            task.cancel()
        if send_tasks:
            await asyncio.gather(*send_tasks, return_exceptions=True)

        if self._receive_task:
            self._receive_task.cancel()
            try:
                await self._receive_task
            except asyncio.CancelledError:
                pass
            self._receive_task = None

        if self._ws:
            await self._ws.close()
            self._ws = None
            logger.info("ws_provider_disconnected")

        self._fail_pending(TransportFailure("WebSocket provider disconnected"))

    async def __aenter__(self) -> "WebSocketSendProvider":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()

    @property
    def pending_count(self) -> int:
        """Number of requests awaiting a response."""
        return sum(len(entries) for entries in self._pending.values())

    def send(self, payload: Dict[str, Any], callback: SendCallback) -> None:
        """
        Send a JSON-RPC envelope; must be called from the event loop.

        Args:
            payload: JSON-RPC envelope with an ``id``
            callback: Invoked once as ``callback(error, response)``
        """
        entry = _PendingRequest(callback)
        task = asyncio.get_running_loop().create_task(self._write(payload, entry))
        self._send_tasks.add(task)
        task.add_done_callback(functools.partial(self._write_done, payload.get("id"), entry))

    async def _write(self, payload: Dict[str, Any], entry: _PendingRequest) -> None:
        request_id = payload.get("id")
        try:
            if self._ws is None:
                await self.connect()
            self._track(request_id, entry, payload.get("method"))
            await self._ws.send(json.dumps(payload))
        except (TransportFailure, websockets.WebSocketException, OSError) as e:
            self._discard(request_id, entry)
            error = e if isinstance(e, TransportFailure) else TransportFailure(
                f"WebSocket send failed for {payload.get('method')}: {e}"
            )
            entry.settle(error, None)

    def _write_done(self, request_id: Any, entry: _PendingRequest, task: asyncio.Task) -> None:
        self._send_tasks.discard(task)
        if task.cancelled():
            self._discard(request_id, entry)
            entry.settle(TransportFailure("WebSocket provider disconnected"), None)

    def _track(self, request_id: Any, entry: _PendingRequest, method: Optional[str] = None) -> None:
        """Queue ``entry`` under ``request_id`` and arm its timeout."""
        self._pending[request_id].append(entry)
        entry.timer = asyncio.get_running_loop().call_later(
            self.config.request_timeout, self._expire, request_id, entry, method,
        )

    def _expire(self, request_id: Any, entry: _PendingRequest, method: Optional[str]) -> None:
        self._discard(request_id, entry)
        logger.warning("ws_provider_request_timeout", request_id=request_id, method=method)
        entry.settle(
            TransportFailure(f"WebSocket request {method} timed out after {self.config.request_timeout}s"),
            None,
        )

    def _discard(self, request_id: Any, entry: _PendingRequest) -> None:
        entries = self._pending.get(request_id)
        if entries and entry in entries:
            entries.remove(entry)
            if not entries:
                del self._pending[request_id]

    async def _receive_loop(self) -> None:
        """Background task to receive WebSocket messages."""
        try:
            async for message in self._ws:
                self._dispatch(message)
        except websockets.ConnectionClosed:
            logger.warning("ws_provider_connection_closed", url=self.url)

        self._ws = None
        self._fail_pending(TransportFailure("WebSocket connection closed"))

    def _dispatch(self, message: Any) -> None:
        """Hand one incoming message to the oldest callback waiting on its id."""
        try:
            data = json.loads(message)
        except ValueError:
            logger.warning("ws_provider_invalid_message", size=len(message))
            return

        request_id = data.get("id") if isinstance(data, dict) else None
        entries = self._pending.get(request_id)
        if not entries:
            logger.debug("ws_provider_unmatched_response", request_id=request_id)
            return

        entry = entries.popleft()
        if not entries:
            del self._pending[request_id]

        if "error" in data:
            error = data["error"]
            message_text = error.get("message", "Unknown error") if isinstance(error, dict) else str(error)
            entry.settle(TransportFailure(f"RPC error: {message_text}", error=error), None)
        else:
            entry.settle(None, data)

    def _fail_pending(self, error: TransportFailure) -> None:
        pending = self._pending
        self._pending = defaultdict(deque)
        for entries in pending.values():
            for entry in entries:
                entry.settle(error, None)
