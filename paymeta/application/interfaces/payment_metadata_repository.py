"""Abstract repository interface (port) for PaymentMetadata persistence."""

from abc import ABC, abstractmethod

from paymeta.domain.entities import PaymentMetadata, PaymentRevision


class PaymentMetadataRepository(ABC):
    """Port for payment metadata persistence — implemented in the infrastructure layer.

    Implementations keep the RSS item index consistent: ``create`` writes the
    record before indexing it, ``delete`` unindexes it before removing it.
    """

    @abstractmethod
    async def get_by_id(self, record_id: str) -> PaymentMetadata | None:
        """Retrieve a single record, update token included."""
        ...

    @abstractmethod
    async def get_all(self, *, skip: int = 0, limit: int = 100) -> list[PaymentMetadata]:
        """Retrieve up to ``limit`` records starting at position ``skip``."""
        ...

    @abstractmethod
    async def count(self) -> int:
        """Return the number of live records."""
        ...

    @abstractmethod
    async def find_by_rss_item(
        self, podcast_guid: str, rss_item_guid: str
    ) -> list[PaymentMetadata]:
        """Retrieve every live record indexed under the RSS item."""
        ...

    @abstractmethod
    async def create(self, record: PaymentMetadata) -> PaymentMetadata:
        """Persist a new record and index it when it carries both RSS item guids."""
        ...

    @abstractmethod
    async def update(
        self,
        record_id: str,
        revision: PaymentRevision,
        *,
        expected_token: str | None = None,
    ) -> bool:
        """Apply a revision. Returns False if no record (with that token) matched."""
        ...

    @abstractmethod
    async def delete(self, record_id: str, *, expected_token: str | None = None) -> bool:
        """Delete a record. Returns False if no record (with that token) matched."""
        ...

    @abstractmethod
    async def validate_update_token(self, record_id: str, update_token: str) -> bool:
        """Return True iff the record exists and its live token equals ``update_token``."""
        ...
