import pytest

from relay.services.room_access import RoomAccess, authorize, create_room, get_room, set_room_password


class TestRoomAccess:

    @pytest.mark.asyncio
    async def test_create_then_authorize(self, session_factory):
        async with session_factory() as db:
            assert await create_room(db, "lobby", "s3cret", "The Lobby") == RoomAccess.ok
            assert await authorize(db, "lobby", "s3cret") == RoomAccess.ok
            room = await get_room(db, "lobby")

        assert room.display_name == "The Lobby"
        assert room.password_hash != "s3cret"

    @pytest.mark.asyncio
    async def test_duplicate_room(self, session_factory):
        async with session_factory() as db:
            await create_room(db, "lobby", "one")
            assert await create_room(db, "lobby", "two") == RoomAccess.already_exists
            assert await authorize(db, "lobby", "one") == RoomAccess.ok

    @pytest.mark.asyncio
    async def test_wrong_secret_and_missing_room(self, session_factory):
        async with session_factory() as db:
            await create_room(db, "lobby", "right")
            assert await authorize(db, "lobby", "wrong") == RoomAccess.wrong_secret
            assert await authorize(db, "attic", "right") == RoomAccess.not_found

    @pytest.mark.asyncio
    async def test_set_room_password(self, session_factory):
        async with session_factory() as db:
            await create_room(db, "lobby", "old")
            assert await set_room_password(db, "lobby", "new") == RoomAccess.ok
            assert await authorize(db, "lobby", "old") == RoomAccess.wrong_secret
            assert await authorize(db, "lobby", "new") == RoomAccess.ok
            assert await set_room_password(db, "attic", "x") == RoomAccess.not_found
