"""Persistent websocket connection to the P2PQuake real-time feed."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from enum import StrEnum
from types import TracebackType

import structlog
import websockets
from websockets.asyncio.client import ClientConnection

from quakerelay.feeds.backoff import ReconnectBackoff
from quakerelay.feeds.exceptions import FeedConnectionError

logger = structlog.get_logger(__name__)

# Receives each raw text frame; runs in its own task.
MessageHandler = Callable[[str | bytes], Awaitable[None]]


class ConnectionState(StrEnum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"


class P2PQuakeFeed:
    """Owns the websocket read loop and reconnects with exponential backoff.

    Reads are strictly sequential. Every frame is handed to *handler* in a
    separately scheduled task, so handlers run concurrently with each other
    and with the next read; completion order is not guaranteed. Handler
    tasks are not bounded.

    The backoff counter is reset once a connection has stayed up for at
    least *reconnect_stable_secs* (``0`` resets on every successful
    connect).

    Usage::

        feed = P2PQuakeFeed(url, relay.handle_message)
        async with feed:
            await stop_event.wait()
    """

    def __init__(
        self,
        ws_url: str,
        handler: MessageHandler,
        reconnect_base_secs: float = 5.0,
        reconnect_cap_secs: float = 30.0,
        reconnect_stable_secs: float = 0.0,
    ) -> None:
        self.ws_url = ws_url
        self._handler = handler
        self._backoff = ReconnectBackoff(reconnect_base_secs, reconnect_cap_secs)
        self._stable_secs = reconnect_stable_secs
        self._ws: ClientConnection | None = None
        self._task: asyncio.Task[None] | None = None
        self._handler_tasks: set[asyncio.Task[None]] = set()
        self._running = False
        self._state = ConnectionState.DISCONNECTED
        self._connected_at: float | None = None
        self._messages_received = 0

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def running(self) -> bool:
        return self._running

    @property
    def backoff(self) -> ReconnectBackoff:
        return self._backoff

    @property
    def messages_received(self) -> int:
        return self._messages_received

    @property
    def pending_handlers(self) -> int:
        return len(self._handler_tasks)

    # ── Lifecycle ───────────────────────────────────────────────

    async def start(self) -> None:
        """Start the connect/read/reconnect loop in a background task."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Stop reconnecting, close the socket and cancel in-flight handlers."""
        self._running = False
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        pending = list(self._handler_tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._state = ConnectionState.DISCONNECTED

    async def drain(self) -> None:
        """Wait for all currently scheduled handler tasks to finish."""
        while self._handler_tasks:
            await asyncio.gather(*list(self._handler_tasks), return_exceptions=True)

    async def __aenter__(self) -> P2PQuakeFeed:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.stop()

    # ── Connection loop ─────────────────────────────────────────

    async def run(self) -> None:
        """Connect, listen, and reconnect until stopped."""
        self._running = True
        while self._running:
            try:
                await self._connect_and_listen()
            except asyncio.CancelledError:
                break
            except FeedConnectionError as exc:
                logger.warning(
                    "ws_connect_failed",
                    url=self.ws_url,
                    error=str(exc.__cause__ or exc),
                )
            except Exception as exc:
                logger.warning("ws_connection_error", url=self.ws_url, error=repr(exc))
            finally:
                self._mark_disconnected()

            if not self._running:
                break

            delay = self._backoff.next_delay()
            logger.info(
                "ws_reconnecting",
                delay=delay,
                attempt=self._backoff.attempts,
            )
            try:
                await asyncio.sleep(delay)
            except asyncio.CancelledError:
                break

    async def _connect_and_listen(self) -> None:
        """One connection: open, read every frame, return on close."""
        self._state = ConnectionState.CONNECTING
        logger.info("ws_connecting", url=self.ws_url)
        try:
            self._ws = await websockets.connect(self.ws_url)
        except Exception as exc:
            raise FeedConnectionError(f"Failed to connect to {self.ws_url}") from exc

        self._state = ConnectionState.CONNECTED
        self._connected_at = time.monotonic()
        logger.info("ws_connected", url=self.ws_url)

        try:
            async for raw in self._ws:
                if not self._running:
                    break
                self._messages_received += 1
                self._spawn_handler(raw)
        finally:
            if self._ws is not None:
                await self._ws.close()
                self._ws = None

    def _mark_disconnected(self) -> None:
        was_connected = self._state == ConnectionState.CONNECTED
        self._state = ConnectionState.DISCONNECTED
        if self._connected_at is not None:
            uptime = time.monotonic() - self._connected_at
            if uptime >= self._stable_secs:
                self._backoff.reset()
            self._connected_at = None
            if was_connected:
                logger.warning("ws_disconnected", url=self.ws_url, uptime_secs=round(uptime, 3))

    # ── Per-message handling ────────────────────────────────────

    def _spawn_handler(self, raw: str | bytes) -> None:
        task = asyncio.create_task(self._run_handler(raw))
        self._handler_tasks.add(task)
        task.add_done_callback(self._handler_tasks.discard)

    async def _run_handler(self, raw: str | bytes) -> None:
        try:
            await self._handler(raw)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("ws_handler_error")
