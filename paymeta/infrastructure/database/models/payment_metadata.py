"""SQLAlchemy ORM models for payment metadata and its RSS item index."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from paymeta.infrastructure.database.base import Base


class PaymentMetadataModel(Base):
    """ORM model — maps to the 'payment_metadata' table."""

    __tablename__ = "payment_metadata"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    # "metadata" is reserved on declarative classes.
    payload: Mapped[dict[str, Any]] = mapped_column("metadata", nullable=False, default=dict)
    signature: Mapped[str | None] = mapped_column(Text, nullable=True)
    podcast_guid: Mapped[str | None] = mapped_column(Text, nullable=True)
    rss_item_guid: Mapped[str | None] = mapped_column(Text, nullable=True)
    update_token: Mapped[str] = mapped_column(String(36), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_payment_metadata_created", "created_at", "id"),
    )

    def __repr__(self) -> str:
        return f"<PaymentMetadataModel(id={self.id}, type='{self.type}')>"


class RSSItemIndexModel(Base):
    """ORM model — one row per (podcast_guid, rss_item_guid, payment_id) bucket member.

    No foreign key: the index may briefly say less than the primary table,
    and readers drop ids whose record is gone.
    """

    __tablename__ = "rss_item_index"

    podcast_guid: Mapped[str] = mapped_column(Text, primary_key=True)
    rss_item_guid: Mapped[str] = mapped_column(Text, primary_key=True)
    payment_id: Mapped[str] = mapped_column(String(36), primary_key=True)

    def __repr__(self) -> str:
        return (
            f"<RSSItemIndexModel(podcast='{self.podcast_guid}', "
            f"item='{self.rss_item_guid}', payment={self.payment_id})>"
        )
