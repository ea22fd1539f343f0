from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

import logging
import atexit

from . import config

logger = logging.getLogger(__name__)

DATABASE_URL = config.DATABASE_URL

# Use NullPool to avoid connection-pool objects being bound to a specific
# event loop (which can cause 'bound to a different event loop' errors when
# the same engine is driven from test loops and TestClient portals).
engine = create_async_engine(DATABASE_URL, echo=False, future=True, poolclass=NullPool)

async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db():
    # import for side effects: registers the table on SQLModel.metadata
    from . import models  # noqa: F401
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


# Dispose the engine's sync pool at interpreter exit to avoid pool finalizer
# warnings about non-checked-in connections during pytest teardown.
def _dispose_sync_engine():
    try:
        engine.sync_engine.dispose()
    except Exception:
        logger.debug('engine dispose at exit failed', exc_info=True)


atexit.register(_dispose_sync_engine)
