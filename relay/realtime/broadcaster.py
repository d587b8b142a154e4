import json
import logging
from typing import Any

from relay.realtime.connection import DeliveryError
from relay.realtime.registry import ConnectionRegistry, RelayConnection

logger = logging.getLogger(__name__)

class Broadcaster:
    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    def broadcast(self, room: str, payload: dict[str, Any]) -> int:
        """Hand one event to every open connection in ``room``; returns how many took it."""
        text = json.dumps(payload, separators=(",", ":"))
        delivered = 0

        def deliver(conn: RelayConnection) -> None:
            nonlocal delivered
            try:
                conn.send(text)
            except DeliveryError as e:
                logger.info("Skipping %r in room %s: %s", conn, room, e.reason)
                return
            except Exception:
                logger.exception("Unexpected send failure for %r in room %s", conn, room)
                return
            delivered += 1

        self.registry.for_each_open_in_room(room, deliver)
        return delivered
