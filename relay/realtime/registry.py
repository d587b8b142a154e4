"""
Connection registry: which live connection sits in which room.

Entries are keyed by connection id and dropped only through ``remove``, which
the close handler calls. Nothing here suspends, so a caller that mutates and
then reads within one synchronous step always sees its own write.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


class RelayConnection(Protocol):
    id: str
    profile_hash: str
    is_alive: bool

    @property
    def is_open(self) -> bool: ...

    def start(self) -> None: ...
    def send(self, text: str) -> None: ...
    def probe(self) -> None: ...
    def mark_alive(self) -> None: ...
    async def close(self, code: int = ...) -> None: ...


@dataclass
class RegistryEntry:
    room: str
    profile_hash: str


class ConnectionRegistry:
    def __init__(self) -> None:
        self._connections: dict[str, RelayConnection] = {}
        self._entries: dict[str, RegistryEntry] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection: RelayConnection) -> bool:
        return connection.id in self._connections

    def register(self, connection: RelayConnection) -> None:
        self._connections[connection.id] = connection

    def set_room(self, connection: RelayConnection, room: str) -> None:
        self._connections[connection.id] = connection
        self._entries[connection.id] = RegistryEntry(room=room, profile_hash=connection.profile_hash)

    def room_of(self, connection: RelayConnection) -> str | None:
        entry = self._entries.get(connection.id)
        return entry.room if entry else None

    def remove(self, connection: RelayConnection) -> RegistryEntry | None:
        self._connections.pop(connection.id, None)
        return self._entries.pop(connection.id, None)

    def connections(self) -> list[RelayConnection]:
        return list(self._connections.values())

    def for_each_open_in_room(self, room: str, visit: Callable[[RelayConnection], None]) -> None:
        # Closed connections are skipped, not removed: removal belongs to the
        # close handler.
        for conn_id, entry in list(self._entries.items()):
            if entry.room != room:
                continue
            connection = self._connections.get(conn_id)
            if connection is not None and connection.is_open:
                visit(connection)
