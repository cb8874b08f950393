"""Application service (use case) for payment metadata operations."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from paymeta.application.interfaces import PaymentMetadataRepository
from paymeta.application.schemas.payment_metadata import (
    PaymentMetadataCreate,
    PaymentMetadataUpdate,
)
from paymeta.domain.entities import (
    PaymentMetadata,
    PaymentRevision,
    new_identifier,
)
from paymeta.domain.exceptions import EntityNotFoundError, InvalidUpdateTokenError

logger = logging.getLogger(__name__)

_ENTITY = "PaymentMetadata"


@dataclass
class PaymentPage:
    """One page of a listing plus the total number of live records."""

    records: list[PaymentMetadata]
    limit: int
    offset: int
    total: int

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total


class PaymentMetadataService:
    """Orchestrates payment metadata CRUD and update-token checks.

    Depends on the repository port (DI). ``id_factory`` mints both record ids
    and update tokens.
    """

    def __init__(
        self,
        repository: PaymentMetadataRepository,
        id_factory: Callable[[], str] = new_identifier,
    ):
        self._repository = repository
        self._new_id = id_factory

    async def get_payment(self, record_id: str) -> PaymentMetadata:
        record = await self._repository.get_by_id(record_id)
        if record is None:
            raise EntityNotFoundError(_ENTITY, record_id)
        return record

    async def find_by_rss_item(
        self, podcast_guid: str, rss_item_guid: str
    ) -> list[PaymentMetadata]:
        """Return every record for the RSS item; an empty result is not-found."""
        records = await self._repository.find_by_rss_item(podcast_guid, rss_item_guid)
        if not records:
            raise EntityNotFoundError("RSSItem", f"{podcast_guid}:{rss_item_guid}")
        return records

    async def list_payments(self, *, limit: int = 100, offset: int = 0) -> PaymentPage:
        records = await self._repository.get_all(skip=offset, limit=limit)
        total = await self._repository.count()
        return PaymentPage(records=records, limit=limit, offset=offset, total=total)

    async def create_payment(self, data: PaymentMetadataCreate) -> PaymentMetadata:
        record = PaymentMetadata(
            id=self._new_id(),
            update_token=self._new_id(),
            type=data.type,
            metadata=data.metadata,
            signature=data.signature,
            podcast_guid=data.podcast_guid,
            rss_item_guid=data.rss_item_guid,
        )
        created = await self._repository.create(record)
        logger.info(
            "Created payment metadata %s (type=%s, indexed=%s)",
            created.id,
            created.type.value,
            created.rss_item_key is not None,
        )
        return created

    async def update_payment(
        self, record_id: str, update_token: str, data: PaymentMetadataUpdate
    ) -> PaymentMetadata:
        """Replace a record's content and rotate its token.

        The RSS item guids are carried over from the stored record.
        """
        existing = await self.get_payment(record_id)
        if not await self._repository.validate_update_token(record_id, update_token):
            logger.warning("Rejected update of %s: invalid updateToken", record_id)
            raise InvalidUpdateTokenError(_ENTITY, record_id)

        revision = PaymentRevision(
            type=data.type,
            metadata=data.metadata,
            signature=data.signature,
            update_token=self._new_id(),
        )
        # Conditional on the token we just checked; a concurrent rotation
        # makes this match nothing.
        applied = await self._repository.update(
            record_id, revision, expected_token=update_token
        )
        if not applied:
            logger.warning("Update of %s lost a race with a concurrent write", record_id)
            if await self._repository.get_by_id(record_id) is None:
                raise EntityNotFoundError(_ENTITY, record_id)
            raise InvalidUpdateTokenError(_ENTITY, record_id)

        existing.apply(revision)
        logger.info("Updated payment metadata %s", record_id)
        return existing

    async def delete_payment(self, record_id: str, update_token: str) -> None:
        await self.get_payment(record_id)
        if not await self._repository.validate_update_token(record_id, update_token):
            logger.warning("Rejected delete of %s: invalid updateToken", record_id)
            raise InvalidUpdateTokenError(_ENTITY, record_id)

        deleted = await self._repository.delete(record_id, expected_token=update_token)
        if not deleted:
            if await self._repository.get_by_id(record_id) is None:
                raise EntityNotFoundError(_ENTITY, record_id)
            raise InvalidUpdateTokenError(_ENTITY, record_id)
        logger.info("Deleted payment metadata %s", record_id)
