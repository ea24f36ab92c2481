"""
Database Session Management

Provides a shared, lazily-initialized async SQLAlchemy engine for PostgreSQL.
The engine is created and verified on first use; connection failures surface
as ``ConnectivityError``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
)

from ..config import settings
from ..core.errors import ConnectivityError
from .models import Base

logger = logging.getLogger("wwah.db")


class Database:
    """
    Lazily connected database shared by every vector store handle.

    Nothing touches the network until ``connect()`` is awaited.
    """

    def __init__(self, url: Optional[str] = None) -> None:
        self._url = url or settings.database_url
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._session_factory is not None

    async def connect(self) -> async_sessionmaker[AsyncSession]:
        """
        Return the session factory, creating and verifying the engine once.

        Raises
        ------
        ConnectivityError
            If the database cannot be reached.
        """
        if self._session_factory is not None:
            return self._session_factory

        async with self._lock:
            if self._session_factory is None:
                engine = create_async_engine(
                    self._url,
                    echo=False,
                    pool_pre_ping=True,
                    pool_size=5,
                    max_overflow=10,
                )
                try:
                    async with engine.connect() as conn:
                        await conn.execute(text("SELECT 1"))
                except (SQLAlchemyError, OSError) as exc:
                    await engine.dispose()
                    logger.error("Database connection failed: %s", type(exc).__name__)
                    raise ConnectivityError(
                        f"Could not connect to vector storage: {type(exc).__name__}"
                    ) from exc

                self._engine = engine
                self._session_factory = async_sessionmaker(
                    bind=engine,
                    class_=AsyncSession,
                    expire_on_commit=False,
                    autoflush=False,
                )
                logger.info("Database connection established")

        return self._session_factory

    async def init_models(self) -> None:
        """
        Create the pgvector extension and every embeddings table.
        """
        await self.connect()
        async with self._engine.begin() as conn:
            await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None


# Process-wide instance
database = Database()
