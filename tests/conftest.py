"""
Pytest configuration and fixtures for the relay tests.
"""

import json
import os
import uuid

# Settings are read at import time, so the environment has to be ready first.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from relay.db.base import Base
from relay.db import models  # noqa: F401
from relay.realtime.broadcaster import Broadcaster
from relay.realtime.connection import PING_FRAME, ConnectionClosed, OutboxFull
from relay.realtime.registry import ConnectionRegistry
from relay.realtime.router import MessageRouter


class FakeConnection:
    """Stands in for a WebSocket-backed Connection; records what it was sent."""

    def __init__(self, profile_hash: str | None = None):
        self.id = uuid.uuid4().hex
        self.profile_hash = profile_hash or uuid.uuid4().hex * 2
        self.is_alive = True
        self.open = True
        self.started = False
        self.full = False
        self.sent: list[str] = []
        self.probes = 0
        self.close_codes: list[int] = []

    @property
    def is_open(self) -> bool:
        return self.open

    def start(self) -> None:
        self.started = True

    def send(self, text: str) -> None:
        if not self.open:
            raise ConnectionClosed(self.id)
        if self.full:
            raise OutboxFull(self.id)
        self.sent.append(text)

    def probe(self) -> None:
        self.probes += 1
        self.send(PING_FRAME)

    def mark_alive(self) -> None:
        self.is_alive = True

    async def close(self, code: int = 1000) -> None:
        self.open = False
        self.close_codes.append(code)

    def events(self) -> list[dict]:
        return [json.loads(t) for t in self.sent if t != PING_FRAME]


class FakeGateway:
    """Records persistence calls; flip ``fail`` to make every call raise."""

    def __init__(self):
        self.fail = False
        self.messages: list[tuple] = []
        self.profiles: list[tuple] = []
        self.offline: list[str] = []

    async def append_message(self, room, payload, timestamp):
        if self.fail:
            raise RuntimeError("database unavailable")
        self.messages.append((room, payload, timestamp))

    async def upsert_profile(self, profile_hash, **fields):
        if self.fail:
            raise RuntimeError("database unavailable")
        self.profiles.append((profile_hash, fields))

    async def mark_offline(self, profile_hash, last_seen):
        if self.fail:
            raise RuntimeError("database unavailable")
        self.offline.append(profile_hash)


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def broadcaster(registry):
    return Broadcaster(registry)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def message_router(registry, broadcaster, gateway):
    return MessageRouter(registry, broadcaster, gateway)


@pytest.fixture
def db_path(tmp_path):
    """
    SQLite file with all tables created.

    Tables are created through a sync engine so no event loop is involved;
    the async engine uses NullPool so every session opens a fresh connection
    on whichever loop is running it.
    """
    path = tmp_path / "relay.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


@pytest.fixture
def sync_engine(db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
