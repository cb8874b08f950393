"""Domain entity — payment metadata records and their update revisions."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4


def new_identifier() -> str:
    """Return a fresh 128-bit random identifier in canonical UUID text form."""
    return str(uuid4())


class PaymentType(str, Enum):
    """Supported payment networks."""

    BITCOIN_LIGHTNING = "bitcoin-lightning"
    MONERO = "monero"


@dataclass
class PaymentRevision:
    """The mutable part of a record, as written by an update.

    Carries no RSS item guids: the index key of a record never changes.
    """

    type: PaymentType
    metadata: dict[str, Any]
    update_token: str
    signature: str | None = None
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class PaymentMetadata:
    """A stored payment metadata entry.

    ``update_token`` is the bearer secret authorising mutation and deletion;
    it never leaves the service except in create/update responses.
    """

    type: PaymentType
    metadata: dict[str, Any]
    id: str = field(default_factory=new_identifier)
    update_token: str = field(default_factory=new_identifier)
    signature: str | None = None
    podcast_guid: str | None = None
    rss_item_guid: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def rss_item_key(self) -> tuple[str, str] | None:
        """The (podcast_guid, rss_item_guid) index key, or None when not indexable."""
        if self.podcast_guid and self.rss_item_guid:
            return self.podcast_guid, self.rss_item_guid
        return None

    def apply(self, revision: PaymentRevision) -> None:
        """Replace the mutable fields; id and RSS item guids are untouched."""
        self.type = revision.type
        self.metadata = revision.metadata
        self.signature = revision.signature
        self.update_token = revision.update_token
        self.updated_at = revision.updated_at
