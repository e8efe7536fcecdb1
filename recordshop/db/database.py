# recordshop/db/database.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

# Базовый класс для моделей
Base = declarative_base()


class Database:
    """Process-wide handle on the async engine.

    Opened once in the application lifespan and disposed on shutdown.
    """

    def __init__(self):
        self.engine: Optional[AsyncEngine] = None
        self.SessionLocal: Optional[async_sessionmaker] = None

    @property
    def connected(self) -> bool:
        return self.engine is not None

    def connect(self, url: str, echo: bool = False, ssl: bool = False) -> None:
        if self.engine is not None:
            raise RuntimeError("Database is already connected")

        connect_args = {}
        if ssl and url.startswith("postgresql+asyncpg"):
            # same as node-postgres rejectUnauthorized: false
            connect_args["ssl"] = "require"

        self.engine = create_async_engine(url, echo=echo, connect_args=connect_args)
        self.SessionLocal = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Database engine created for %s", self.engine.url.render_as_string(hide_password=True))

    async def ping(self) -> bool:
        if self.engine is None:
            return False
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError):
            logger.exception("Database ping failed")
            return False

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self.SessionLocal is None:
            raise RuntimeError("Database is not connected")
        async with self.SessionLocal() as session:
            yield session

    async def disconnect(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        logger.info("Database engine disposed")
        self.engine = None
        self.SessionLocal = None


database = Database()


# Генератор сессий
async def get_db():
    async with database.session() as session:
        yield session
