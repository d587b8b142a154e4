"""
Message router for the relay WebSocket.

Every inbound frame is classified on its own. Registry updates and fan-out
happen synchronously inside ``handle``; database writes are handed to
background tasks whose failures are logged and never reach the peers.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from relay.core.timeutil import utcnow
from relay.realtime.broadcaster import Broadcaster
from relay.realtime.events import InboundFrame, message_event, parse_frame, presence_event, typing_event
from relay.realtime.registry import ConnectionRegistry, RelayConnection
from relay.services.persistence import PersistenceGateway

logger = logging.getLogger(__name__)


class MessageRouter:
    def __init__(
        self,
        registry: ConnectionRegistry,
        broadcaster: Broadcaster,
        persistence: PersistenceGateway,
        require_join: bool = False,
    ):
        self.registry = registry
        self.broadcaster = broadcaster
        self.persistence = persistence
        self.require_join = require_join
        self._pending: set[asyncio.Task] = set()

    def open(self, conn: RelayConnection) -> None:
        self.registry.register(conn)
        conn.start()
        logger.info("Connection %s opened (profile %s)", conn.id, conn.profile_hash[:8])

    def handle(self, conn: RelayConnection, raw: str | bytes) -> None:
        frame = parse_frame(raw)
        if frame is None:
            return

        kind = frame.kind
        if kind == "pong":
            conn.mark_alive()
        elif kind == "join":
            self._join(conn, frame)
        elif kind == "typing":
            if self._accepts(conn, frame):
                self.broadcaster.broadcast(
                    frame.room, typing_event(frame.room, conn.profile_hash, bool(frame.typing))
                )
        elif kind == "message":
            if self._accepts(conn, frame):
                self._relay_message(frame)

    def on_close(self, conn: RelayConnection) -> None:
        # Both the endpoint and the liveness monitor end up here.
        if conn not in self.registry:
            return
        entry = self.registry.remove(conn)
        self._submit(
            self.persistence.mark_offline(conn.profile_hash, last_seen=utcnow()),
            f"mark {conn.profile_hash[:8]} offline",
        )
        logger.info("Connection %s closed", conn.id)
        if entry is not None:
            self.broadcaster.broadcast(entry.room, presence_event(entry.room, entry.profile_hash))

    async def drain(self) -> None:
        """Wait for every background write submitted so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _join(self, conn: RelayConnection, frame: InboundFrame) -> None:
        room = frame.room
        self.registry.set_room(conn, room)
        self._submit(
            self.persistence.upsert_profile(conn.profile_hash, online=True, last_seen=utcnow()),
            f"mark {conn.profile_hash[:8]} online",
        )
        self.broadcaster.broadcast(room, presence_event(room, conn.profile_hash))

    def _relay_message(self, frame: InboundFrame) -> None:
        timestamp = utcnow()
        self.broadcaster.broadcast(frame.room, message_event(frame.room, frame.payload, timestamp))
        self._submit(
            self.persistence.append_message(frame.room, frame.payload, timestamp),
            f"store message for room {frame.room}",
        )

    def _accepts(self, conn: RelayConnection, frame: InboundFrame) -> bool:
        if not self.require_join:
            return True
        if self.registry.room_of(conn) == frame.room:
            return True
        logger.debug("Dropping %s from %s: not joined to %s", frame.kind, conn.id, frame.room)
        return False

    def _submit(self, coro: Coroutine[Any, Any, None], what: str) -> None:
        task = asyncio.create_task(coro)
        self._pending.add(task)

        def done(t: asyncio.Task) -> None:
            self._pending.discard(t)
            if t.cancelled():
                logger.warning("Background write cancelled: %s", what)
            elif t.exception() is not None:
                logger.error("Background write failed: %s", what, exc_info=t.exception())

        task.add_done_callback(done)
