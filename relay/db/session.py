from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from relay.core.config import settings

engine = create_async_engine(settings.DATABASE_URL, pool_pre_ping=True)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def get_db():
    async with AsyncSessionLocal() as db:
        yield db
