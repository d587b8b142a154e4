import enum
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from relay.core.security import hash_password, verify_password
from relay.db.models.room import Room

class RoomAccess(str, enum.Enum):
    ok = "ok"
    already_exists = "already_exists"
    not_found = "not_found"
    wrong_secret = "wrong_secret"

async def get_room(db: AsyncSession, room_id: str) -> Room | None:
    q = await db.execute(select(Room).where(Room.room_id == room_id))
    return q.scalar_one_or_none()

async def create_room(db: AsyncSession, room_id: str, password: str, display_name: str = "") -> RoomAccess:
    if await get_room(db, room_id):
        return RoomAccess.already_exists
    db.add(Room(room_id=room_id, password_hash=hash_password(password), display_name=display_name or ""))
    await db.commit()
    return RoomAccess.ok

async def authorize(db: AsyncSession, room_id: str, password: str) -> RoomAccess:
    room = await get_room(db, room_id)
    if not room:
        return RoomAccess.not_found
    if not verify_password(password, room.password_hash):
        return RoomAccess.wrong_secret
    return RoomAccess.ok

async def set_room_password(db: AsyncSession, room_id: str, password: str) -> RoomAccess:
    room = await get_room(db, room_id)
    if not room:
        return RoomAccess.not_found
    room.password_hash = hash_password(password)
    await db.commit()
    return RoomAccess.ok
