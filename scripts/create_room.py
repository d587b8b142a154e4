import asyncio
from getpass import getpass

from relay.db.session import AsyncSessionLocal, engine
from relay.db.base import Base
from relay.db import models  # noqa: F401
from relay.services.room_access import RoomAccess, create_room

async def main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    room_id = input("Room id: ").strip()
    display_name = input("Display name (optional): ").strip()
    password = getpass("Room password: ").strip()
    if not room_id or not password:
        print("Room id and password are required.")
        return

    async with AsyncSessionLocal() as db:
        result = await create_room(db, room_id, password, display_name)
        if result == RoomAccess.already_exists:
            print("Room already exists.")
            return
        print("Room created:", room_id)

if __name__ == "__main__":
    asyncio.run(main())
