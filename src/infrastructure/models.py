"""SQLAlchemy ORM models for database tables."""

from datetime import UTC, datetime

from sqlalchemy import Float, Index, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for chat history models."""

    pass


class WarehouseBase(DeclarativeBase):
    """Base class for warehouse models (separate database)."""

    pass


class ChatTranscriptModel(Base):
    """One stored transcript per chat id."""

    __tablename__ = "chat_transcripts"

    chat_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    messages: Mapped[str] = mapped_column(Text)  # JSON array of messages
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    __table_args__ = (Index("idx_transcripts_updated_at", "updated_at"),)


class VendorModel(WarehouseBase):
    """Generated vendor row."""

    __tablename__ = "vendors"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    vendor_id: Mapped[str] = mapped_column(String(64), unique=True)
    name: Mapped[str] = mapped_column(String(255))
    industry: Mapped[str] = mapped_column(String(255))
    location: Mapped[str] = mapped_column(String(255))
    speciality: Mapped[str] = mapped_column(String(255))
    phone: Mapped[str] = mapped_column(String(64))
    email: Mapped[str] = mapped_column(String(255))
    rating: Mapped[float] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    __table_args__ = (Index("idx_vendors_industry_location", "industry", "location"),)
