from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from relay.core.config import settings
from relay.core.timeutil import to_wire
from relay.db.session import get_db
from relay.services.persistence import recent_messages

router = APIRouter()

@router.get("/history")
async def history(room: str | None = None, db: AsyncSession = Depends(get_db)):
    if not room:
        raise HTTPException(400, "room required")
    docs = await recent_messages(db, room, settings.HISTORY_LIMIT)
    return {
        "ok": True,
        "messages": [{"payload": m.payload, "timestamp": to_wire(m.timestamp)} for m in docs],
    }
