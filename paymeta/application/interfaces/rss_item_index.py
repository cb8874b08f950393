"""Abstract secondary index (port) mapping RSS items to payment record ids."""

from abc import ABC, abstractmethod


class RSSItemIndex(ABC):
    """Port for the (podcast_guid, rss_item_guid) -> set of record ids index.

    A bucket exists only while it has members; an absent bucket and an
    empty one are indistinguishable to callers.
    """

    @abstractmethod
    async def add(self, podcast_guid: str, rss_item_guid: str, record_id: str) -> None:
        """Add a record id to the bucket. Re-adding a member is a no-op."""
        ...

    @abstractmethod
    async def remove(self, podcast_guid: str, rss_item_guid: str, record_id: str) -> None:
        """Remove a record id from the bucket. Removing a non-member is a no-op."""
        ...

    @abstractmethod
    async def members_of(self, podcast_guid: str, rss_item_guid: str) -> set[str]:
        """Return the (possibly empty) set of record ids in the bucket."""
        ...
