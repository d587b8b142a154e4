from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from relay.db.session import get_db
from relay.services.room_access import RoomAccess, authorize, create_room

router = APIRouter()

def room_credentials(payload: dict) -> tuple[str, str]:
    room_id = payload.get("roomId")
    password = payload.get("password")
    if not isinstance(room_id, str) or not isinstance(password, str) or not room_id or not password:
        raise HTTPException(400, "roomId and password required")
    return room_id, password

@router.post("/create-room")
async def create(payload: dict, db: AsyncSession = Depends(get_db)):
    room_id, password = room_credentials(payload)
    display_name = payload.get("displayName") or ""
    if not isinstance(display_name, str):
        raise HTTPException(400, "displayName must be a string")
    result = await create_room(db, room_id, password, display_name)
    if result == RoomAccess.already_exists:
        raise HTTPException(409, "room exists")
    return {"ok": True}

@router.post("/join-room")
async def join(payload: dict, db: AsyncSession = Depends(get_db)):
    room_id, password = room_credentials(payload)
    result = await authorize(db, room_id, password)
    if result == RoomAccess.not_found:
        raise HTTPException(404, "not found")
    if result == RoomAccess.wrong_secret:
        raise HTTPException(403, "wrong password")
    return {"ok": True}
