from .payment_metadata_repository import SQLAlchemyPaymentMetadataRepository
from .rss_item_index import SQLAlchemyRSSItemIndex

__all__ = [
    "SQLAlchemyPaymentMetadataRepository",
    "SQLAlchemyRSSItemIndex",
]
