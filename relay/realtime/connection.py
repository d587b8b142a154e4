"""
A single accepted WebSocket session.

Outbound frames go through a bounded FIFO drained by one writer task, so
``send`` never suspends and frames reach a peer in the order they were sent.
"""

import asyncio
import logging
import uuid

from fastapi import WebSocket, status
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)

PING_FRAME = '{"type":"ping"}'


class DeliveryError(Exception):
    def __init__(self, connection_id: str, reason: str):
        super().__init__(f"{connection_id}: {reason}")
        self.connection_id = connection_id
        self.reason = reason


class ConnectionClosed(DeliveryError):
    def __init__(self, connection_id: str):
        super().__init__(connection_id, "connection closed")


class OutboxFull(DeliveryError):
    def __init__(self, connection_id: str):
        super().__init__(connection_id, "outbound buffer full")


class Connection:
    def __init__(self, websocket: WebSocket, profile_hash: str, max_pending: int = 256):
        self.id = uuid.uuid4().hex
        self.profile_hash = profile_hash
        self.is_alive = True
        self._websocket = websocket
        self._outbox: asyncio.Queue[str] = asyncio.Queue(maxsize=max_pending)
        self._writer: asyncio.Task | None = None
        self._closing = False
        self._broken = False

    def __repr__(self) -> str:
        return f"<Connection {self.id} profile={self.profile_hash[:8]}>"

    @property
    def is_open(self) -> bool:
        if self._closing or self._broken:
            return False
        return (
            self._websocket.client_state == WebSocketState.CONNECTED
            and self._websocket.application_state == WebSocketState.CONNECTED
        )

    def start(self) -> None:
        if self._writer is None:
            self._writer = asyncio.create_task(self._pump(), name=f"ws-writer-{self.id}")

    def send(self, text: str) -> None:
        if not self.is_open:
            raise ConnectionClosed(self.id)
        try:
            self._outbox.put_nowait(text)
        except asyncio.QueueFull:
            raise OutboxFull(self.id) from None

    def probe(self) -> None:
        self.send(PING_FRAME)

    def mark_alive(self) -> None:
        self.is_alive = True

    async def flush(self) -> None:
        """Wait until everything queued so far has been written (or dropped)."""
        await self._outbox.join()

    async def close(self, code: int = status.WS_1000_NORMAL_CLOSURE) -> None:
        if self._closing:
            return
        self._closing = True
        if self._writer is not None:
            self._writer.cancel()
            self._writer = None
        self._discard_pending()
        if (
            self._websocket.application_state == WebSocketState.CONNECTED
            and self._websocket.client_state != WebSocketState.DISCONNECTED
        ):
            try:
                await self._websocket.close(code=code)
            except Exception as e:
                logger.debug("Closing %s raised %r", self, e)

    async def _pump(self) -> None:
        while True:
            text = await self._outbox.get()
            try:
                await self._websocket.send_text(text)
            except Exception as e:
                logger.warning("Send to %s failed, marking broken: %r", self, e)
                self._broken = True
                self._discard_pending()
                return
            finally:
                self._outbox.task_done()

    def _discard_pending(self) -> None:
        while not self._outbox.empty():
            self._outbox.get_nowait()
            self._outbox.task_done()
