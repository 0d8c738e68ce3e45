# database.py: one Store per application, handed to handlers via Depends
import logging

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()

logger = logging.getLogger("catalog.database")


class Store:
    """Engine plus session factory, opened once at startup and shared by all requests."""

    def __init__(self, url: str, echo: bool = False):
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        self.engine = create_async_engine(url, echo=echo, connect_args=connect_args)
        self.sessionmaker = sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def init(self):
        import models  # noqa: F401  (registers the tables on Base.metadata)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("store ready at %s", self.engine.url.render_as_string(hide_password=True))

    async def dispose(self):
        await self.engine.dispose()


def get_store(request: Request) -> Store:
    return request.app.state.store


async def get_db(request: Request):
    async with get_store(request).session() as session:
        yield session
