from fastapi import APIRouter
from relay.api.routes import rooms, history, profile, websocket

api = APIRouter()
api.include_router(rooms.router, tags=["rooms"])
api.include_router(history.router, tags=["history"])
api.include_router(profile.router, tags=["profile"])
api.include_router(websocket.router, tags=["ws"])
