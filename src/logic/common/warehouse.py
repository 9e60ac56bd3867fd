"""Vendor warehouse: fire-and-forget persistence of generated vendors."""

import logging

from domain.entities import VendorRecord
from domain.exceptions import WarehouseUnavailableError
from infrastructure.database import DatabaseManager
from repositories.vendor_repository import VendorRepository

logger = logging.getLogger(__name__)


class VendorWarehouse:
    """Inserts vendor rows into the warehouse database, when one is configured."""

    def __init__(
        self, database: DatabaseManager | None, vendor_repo: VendorRepository
    ) -> None:
        """Initialize vendor warehouse.

        Args:
            database: Warehouse database, None when not configured
            vendor_repo: Vendor repository instance
        """
        self.database = database
        self.vendor_repo = vendor_repo

    async def insert(self, vendors: list[VendorRecord]) -> int:
        """Insert vendor rows in one transaction.

        Returns:
            int: Number of rows inserted

        Raises:
            WarehouseUnavailableError: No warehouse database configured
            sqlalchemy.exc.SQLAlchemyError: The insert failed
        """
        if self.database is None:
            raise WarehouseUnavailableError(
                "Warehouse not configured. Set WAREHOUSE_DATABASE_URL"
            )

        await self.database.ensure_schema()
        async with self.database.async_session_maker() as db_session:
            try:
                count = await self.vendor_repo.insert_many(db_session, vendors)
                await db_session.commit()
            except Exception:
                await db_session.rollback()
                raise
        return count
