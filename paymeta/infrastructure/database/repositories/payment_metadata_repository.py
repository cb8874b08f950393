"""Concrete repository implementation for PaymentMetadata backed by SQLAlchemy."""

import hmac
import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from paymeta.application.interfaces import PaymentMetadataRepository, RSSItemIndex
from paymeta.domain.entities import PaymentMetadata, PaymentRevision, PaymentType
from paymeta.domain.exceptions import DuplicateEntityError
from paymeta.infrastructure.database.models import PaymentMetadataModel
from paymeta.infrastructure.database.repositories.rss_item_index import (
    SQLAlchemyRSSItemIndex,
)

logger = logging.getLogger(__name__)


def _tokens_equal(stored: str, supplied: str) -> bool:
    return hmac.compare_digest(stored.encode("utf-8"), supplied.encode("utf-8"))


class SQLAlchemyPaymentMetadataRepository(PaymentMetadataRepository):
    """Implements the PaymentMetadataRepository port using SQLAlchemy async sessions.

    The RSS item index shares the session, so a request's record and index
    writes commit or roll back together.
    """

    def __init__(self, session: AsyncSession, index: RSSItemIndex | None = None):
        self._session = session
        self._index = index if index is not None else SQLAlchemyRSSItemIndex(session)

    def _to_entity(self, model: PaymentMetadataModel) -> PaymentMetadata:
        """Map ORM model → domain entity."""
        return PaymentMetadata(
            id=model.id,
            type=PaymentType(model.type),
            metadata=model.payload,
            signature=model.signature,
            podcast_guid=model.podcast_guid,
            rss_item_guid=model.rss_item_guid,
            update_token=model.update_token,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: PaymentMetadata) -> PaymentMetadataModel:
        """Map domain entity → ORM model (for creation)."""
        return PaymentMetadataModel(
            id=entity.id,
            type=entity.type.value,
            payload=entity.metadata,
            signature=entity.signature,
            podcast_guid=entity.podcast_guid,
            rss_item_guid=entity.rss_item_guid,
            update_token=entity.update_token,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def _load(self, record_id: str) -> PaymentMetadataModel | None:
        return await self._session.get(
            PaymentMetadataModel, record_id, populate_existing=True
        )

    async def get_by_id(self, record_id: str) -> PaymentMetadata | None:
        model = await self._load(record_id)
        return self._to_entity(model) if model else None

    async def get_all(self, *, skip: int = 0, limit: int = 100) -> list[PaymentMetadata]:
        stmt = (
            select(PaymentMetadataModel)
            .order_by(PaymentMetadataModel.created_at, PaymentMetadataModel.id)
            .offset(skip)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def count(self) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(PaymentMetadataModel)
        )
        return result.scalar_one()

    async def find_by_rss_item(
        self, podcast_guid: str, rss_item_guid: str
    ) -> list[PaymentMetadata]:
        ids = await self._index.members_of(podcast_guid, rss_item_guid)
        if not ids:
            return []
        # Ids whose record is gone simply do not match.
        stmt = (
            select(PaymentMetadataModel)
            .where(PaymentMetadataModel.id.in_(ids))
            .order_by(PaymentMetadataModel.created_at, PaymentMetadataModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, record: PaymentMetadata) -> PaymentMetadata:
        if await self._load(record.id) is not None:
            raise DuplicateEntityError("PaymentMetadata", "id", record.id)

        model = self._to_model(record)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise DuplicateEntityError("PaymentMetadata", "id", record.id) from exc

        # Primary write first: a failure here leaves a findable, unindexed record.
        key = record.rss_item_key
        if key is not None:
            await self._index.add(*key, record.id)
        return self._to_entity(model)

    async def update(
        self,
        record_id: str,
        revision: PaymentRevision,
        *,
        expected_token: str | None = None,
    ) -> bool:
        stmt = (
            update(PaymentMetadataModel)
            .where(PaymentMetadataModel.id == record_id)
            .values(
                {
                    PaymentMetadataModel.type: revision.type.value,
                    PaymentMetadataModel.payload: revision.metadata,
                    PaymentMetadataModel.signature: revision.signature,
                    PaymentMetadataModel.update_token: revision.update_token,
                    PaymentMetadataModel.updated_at: revision.updated_at,
                }
            )
        )
        if expected_token is not None:
            stmt = stmt.where(PaymentMetadataModel.update_token == expected_token)
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def delete(self, record_id: str, *, expected_token: str | None = None) -> bool:
        model = await self._load(record_id)
        if model is None:
            return False
        if expected_token is not None and not _tokens_equal(model.update_token, expected_token):
            return False

        key = self._to_entity(model).rss_item_key
        # Index first: a failure after this leaves a record the index no longer
        # lists, never an index entry pointing at nothing.
        if key is not None:
            await self._index.remove(*key, record_id)

        result = await self._session.execute(
            delete(PaymentMetadataModel).where(
                PaymentMetadataModel.id == record_id,
                PaymentMetadataModel.update_token == model.update_token,
            )
        )
        if result.rowcount == 0:
            # Token rotated underneath us; the record lives on, so does its entry.
            if key is not None:
                await self._index.add(*key, record_id)
            return False
        return True

    async def validate_update_token(self, record_id: str, update_token: str) -> bool:
        model = await self._load(record_id)
        if model is None:
            return False
        return _tokens_equal(model.update_token, update_token)
