"""
Durable store access for the relay core.

The WebSocket side never waits on these calls: the message router hands the
coroutines to background tasks and only logs their failures. The HTTP routes
reuse the module-level helpers with their request-scoped session.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from relay.db.models.message import Message
from relay.db.session import AsyncSessionLocal
from relay.db.models.profile import Profile

PROFILE_FIELDS = {"display_name", "online", "last_seen"}


async def save_profile(db: AsyncSession, profile_hash: str, **fields: Any) -> None:
    unknown = set(fields) - PROFILE_FIELDS
    if unknown:
        raise ValueError(f"unknown profile fields: {sorted(unknown)}")

    q = await db.execute(select(Profile).where(Profile.profile_hash == profile_hash))
    profile = q.scalar_one_or_none()
    if profile is None:
        db.add(Profile(profile_hash=profile_hash, **fields))
        try:
            await db.commit()
            return
        except IntegrityError:
            # Lost an insert race with another upsert for the same origin.
            await db.rollback()
            q = await db.execute(select(Profile).where(Profile.profile_hash == profile_hash))
            profile = q.scalar_one()

    for name, value in fields.items():
        setattr(profile, name, value)
    await db.commit()


async def recent_messages(db: AsyncSession, room: str, limit: int) -> list[Message]:
    q = await db.execute(
        select(Message).where(Message.room == room).order_by(Message.timestamp, Message.id).limit(limit)
    )
    return list(q.scalars().all())


class PersistenceGateway:
    """Opens a short-lived session per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None):
        self._session_factory = session_factory or AsyncSessionLocal

    async def append_message(self, room: str, payload: str, timestamp: datetime) -> None:
        async with self._session_factory() as db:
            db.add(Message(room=room, payload=payload, timestamp=timestamp))
            await db.commit()

    async def upsert_profile(self, profile_hash: str, **fields: Any) -> None:
        async with self._session_factory() as db:
            await save_profile(db, profile_hash, **fields)

    async def mark_offline(self, profile_hash: str, last_seen: datetime) -> None:
        """Update only; a profile that was never stored stays absent."""
        async with self._session_factory() as db:
            await db.execute(
                update(Profile).where(Profile.profile_hash == profile_hash).values(online=False, last_seen=last_seen)
            )
            await db.commit()
