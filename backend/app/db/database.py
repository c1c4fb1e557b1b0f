import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


# SQLAlchemy Base for ORM models
class Base(DeclarativeBase):
    pass


def get_async_url(url: str) -> str:
    """Convert database URL to async SQLAlchemy format."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def _serialize_sqlite_writers(engine: AsyncEngine):
    """Open every SQLite transaction with BEGIN IMMEDIATE.

    SQLite ignores SELECT ... FOR UPDATE, so the write lock is taken at BEGIN
    and concurrent read-modify-write transactions run one at a time.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_implicit_begin(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    """Owns the async engine and session factory for one application instance."""

    def __init__(self, url: str, echo: bool = False):
        self.url = get_async_url(url)
        self.echo = echo
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    async def connect(self):
        """Create database engine."""
        if self.engine:
            return
        self.engine = create_async_engine(self.url, echo=self.echo)
        if self.engine.dialect.name == "sqlite":
            _serialize_sqlite_writers(self.engine)
        self.session_factory = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)
        logger.info(f"Database engine created for {self.engine.url.render_as_string(hide_password=True)}")

    async def disconnect(self):
        """Close database engine."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None

    async def create_all(self):
        """Create tables for every registered model that does not exist yet."""
        if not self.engine:
            await self.connect()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self):
        if not self.engine:
            await self.connect()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if not self.engine:
            await self.connect()

        async with self.session_factory() as session:
            yield session
