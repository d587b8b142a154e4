import asyncio
from getpass import getpass

from relay.db.session import AsyncSessionLocal, engine
from relay.db.base import Base
from relay.db import models  # noqa: F401
from relay.services.room_access import RoomAccess, set_room_password


async def main():
    # ensure tables exist
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    room_id = input("Room to reset: ").strip()
    new_pass = getpass("New password: ").strip()

    if not new_pass:
        print("Password cannot be empty")
        return

    async with AsyncSessionLocal() as db:
        if await set_room_password(db, room_id, new_pass) == RoomAccess.not_found:
            print("Room not found:", room_id)
            return
        print("Password reset OK for:", room_id)


if __name__ == "__main__":
    asyncio.run(main())
