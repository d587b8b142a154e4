from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from relay.core.config import settings
from relay.core.logging import setup_logging
from relay.api.router import api
from relay.db.session import engine
from relay.db.base import Base
from relay.realtime.hub import liveness_monitor, message_router

# Import models so Base knows them
from relay.db import models  # noqa: F401

setup_logging()

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

@app.on_event("startup")
async def startup():
    if settings.AUTO_CREATE_TABLES:
        # Simple start. For production, replace with migrations.
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    liveness_monitor.start()

@app.on_event("shutdown")
async def shutdown():
    await liveness_monitor.stop()
    await message_router.drain()

app.include_router(api)

@app.get("/status")
def status():
    return {"ok": True}
