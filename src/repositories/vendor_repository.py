"""Vendor repository for warehouse inserts of generated vendors."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities import VendorRecord
from infrastructure.models import VendorModel

logger = logging.getLogger(__name__)


class VendorRepository:
    """Repository for vendor rows using SQLAlchemy ORM."""

    async def insert_many(
        self, session: AsyncSession, vendors: list[VendorRecord]
    ) -> int:
        """Insert flat vendor rows in order, skipping vendor ids already stored.

        Generation is deterministic, so repeated searches yield the same ids.

        Args:
            session: SQLAlchemy async session (can be part of a transaction)
            vendors: Vendor records to insert

        Returns:
            int: Number of rows added
        """
        result = await session.execute(
            select(VendorModel.vendor_id).where(
                VendorModel.vendor_id.in_([vendor.id for vendor in vendors])
            )
        )
        seen = set(result.scalars().all())

        new_rows = []
        for vendor in vendors:
            if vendor.id in seen:
                continue
            seen.add(vendor.id)
            new_rows.append(
                VendorModel(
                    vendor_id=vendor.id,
                    name=vendor.name,
                    industry=vendor.industry,
                    location=vendor.location,
                    speciality=vendor.speciality,
                    phone=vendor.phone,
                    email=vendor.email,
                    rating=vendor.rating,
                )
            )

        session.add_all(new_rows)
        await session.flush()

        skipped = len(vendors) - len(new_rows)
        if skipped:
            logger.info(f"Skipped {skipped} vendor rows already stored")
        logger.info(f"Inserted {len(new_rows)} vendor rows")
        return len(new_rows)
