import logging
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from relay.core.config import settings
from relay.core.security import client_ip, hash_origin
from relay.realtime.connection import Connection
from relay.realtime.hub import get_message_router
from relay.realtime.router import MessageRouter

logger = logging.getLogger(__name__)

router = APIRouter()

@router.websocket("/ws")
async def ws_endpoint(ws: WebSocket, message_router: MessageRouter = Depends(get_message_router)):
    profile_hash = hash_origin(client_ip(ws))
    await ws.accept()
    conn = Connection(ws, profile_hash, max_pending=settings.OUTBOUND_QUEUE_SIZE)
    message_router.open(conn)
    try:
        while True:
            try:
                message = await ws.receive()
            except RuntimeError as e:
                # receive() after the liveness monitor closed the socket
                logger.debug("Receive loop for %s ended: %s", conn.id, e)
                break
            if message["type"] == "websocket.disconnect":
                break
            data = message.get("text")
            if data is None:
                data = message.get("bytes") or b""
            try:
                message_router.handle(conn, data)
            except Exception:
                logger.exception("Dropping frame from %s after handler error", conn.id)
    except WebSocketDisconnect:
        pass
    finally:
        message_router.on_close(conn)
        await conn.close()
