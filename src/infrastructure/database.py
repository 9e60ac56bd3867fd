"""Database infrastructure with SQLAlchemy async engine and session management."""

import asyncio
import logging
from pathlib import Path

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages SQLAlchemy async engine, sessions and lazy schema creation."""

    def __init__(
        self, database_url: str, metadata: MetaData, echo: bool = False
    ) -> None:
        """Initialize database manager.

        Nothing touches the filesystem or the database until the first call to
        ensure_schema().

        Args:
            database_url: Database URL (e.g., sqlite+aiosqlite:///./data/db.db)
            metadata: Metadata of the tables this database holds
            echo: Echo SQL statements to the log
        """
        self.database_url = database_url
        self.metadata = metadata
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

        connect_args = {}
        if "sqlite" in database_url:
            connect_args = {
                "timeout": 30.0,
                "check_same_thread": False,
            }

        self.engine: AsyncEngine = create_async_engine(
            database_url,
            echo=echo,
            future=True,
            connect_args=connect_args,
        )

        self.async_session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        logger.info(f"Database engine created: {database_url}")

    def _ensure_data_directory(self) -> None:
        """Ensure the database directory exists."""
        if "sqlite" in self.database_url and ":///" in self.database_url:
            db_path = self.database_url.split("///")[1]
            if db_path and db_path != ":memory:":
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def ensure_schema(self) -> None:
        """Create the data directory and tables once; later calls are no-ops."""
        if self._schema_ready:
            return
        async with self._schema_lock:
            if self._schema_ready:
                return
            self._ensure_data_directory()
            async with self.engine.begin() as conn:
                await conn.run_sync(self.metadata.create_all)
            self._schema_ready = True
            logger.info(f"Database schema ready: {self.database_url}")

    async def close(self) -> None:
        """Close the database engine."""
        await self.engine.dispose()
        logger.info("Database engine closed")
