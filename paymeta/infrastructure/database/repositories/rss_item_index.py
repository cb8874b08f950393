"""RSS item secondary index backed by the rss_item_index table."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from paymeta.application.interfaces import RSSItemIndex
from paymeta.infrastructure.database.models import RSSItemIndexModel

logger = logging.getLogger(__name__)


class SQLAlchemyRSSItemIndex(RSSItemIndex):
    """Implements the RSSItemIndex port; a bucket is the set of rows sharing a guid pair."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, podcast_guid: str, rss_item_guid: str, record_id: str) -> None:
        existing = await self._session.get(
            RSSItemIndexModel, (podcast_guid, rss_item_guid, record_id)
        )
        if existing is not None:
            return
        self._session.add(
            RSSItemIndexModel(
                podcast_guid=podcast_guid,
                rss_item_guid=rss_item_guid,
                payment_id=record_id,
            )
        )
        await self._session.flush()
        logger.debug("Indexed %s under %s:%s", record_id, podcast_guid, rss_item_guid)

    async def remove(self, podcast_guid: str, rss_item_guid: str, record_id: str) -> None:
        await self._session.execute(
            delete(RSSItemIndexModel).where(
                RSSItemIndexModel.podcast_guid == podcast_guid,
                RSSItemIndexModel.rss_item_guid == rss_item_guid,
                RSSItemIndexModel.payment_id == record_id,
            )
        )
        logger.debug("Unindexed %s from %s:%s", record_id, podcast_guid, rss_item_guid)

    async def members_of(self, podcast_guid: str, rss_item_guid: str) -> set[str]:
        result = await self._session.execute(
            select(RSSItemIndexModel.payment_id).where(
                RSSItemIndexModel.podcast_guid == podcast_guid,
                RSSItemIndexModel.rss_item_guid == rss_item_guid,
            )
        )
        return set(result.scalars().all())
