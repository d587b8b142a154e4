from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession
from relay.core.security import client_ip, hash_origin
from relay.core.timeutil import utcnow
from relay.db.session import get_db
from relay.services.persistence import save_profile

router = APIRouter()

@router.post("/profile")
async def upsert_profile(request: Request, payload: dict, db: AsyncSession = Depends(get_db)):
    display_name = payload.get("displayName") or ""
    if not isinstance(display_name, str):
        raise HTTPException(400, "displayName must be a string")
    profile_hash = hash_origin(client_ip(request))
    await save_profile(db, profile_hash, display_name=display_name, last_seen=utcnow())
    return {"ok": True}
